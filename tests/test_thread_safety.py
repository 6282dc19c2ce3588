"""Tests for serialized resolution across threads."""

import threading
import time

from dicompose.container import Container
from dicompose.references import Reference


class SlowService:
    instances = 0
    lock = threading.Lock()

    def __init__(self) -> None:
        time.sleep(0.01)
        with SlowService.lock:
            SlowService.instances += 1


class Consumer:
    def __init__(self, dependency: SlowService) -> None:
        self.dependency = dependency


def test_concurrent_first_resolution_composes_once(container: Container) -> None:
    SlowService.instances = 0
    container.register("slow", SlowService)
    results: list[SlowService] = []
    errors: list[Exception] = []

    def resolve_service() -> None:
        try:
            results.append(container.get("slow"))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=resolve_service) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert len(results) == 10
    assert all(r is results[0] for r in results)
    assert SlowService.instances == 1


def test_concurrent_dependents_share_dependency(container: Container) -> None:
    SlowService.instances = 0
    container.register("slow", SlowService)
    for index in range(5):
        container.register(f"consumer{index}", Consumer, Reference("slow"))
    results: list[Consumer] = []
    errors: list[Exception] = []

    def resolve_consumer(index: int) -> None:
        try:
            results.append(container.get(f"consumer{index}"))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=resolve_consumer, args=(i,)) for i in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert not errors
    assert {id(consumer.dependency) for consumer in results} == {id(container.get("slow"))}
    assert SlowService.instances == 1
