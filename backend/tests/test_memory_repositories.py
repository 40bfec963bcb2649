import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from kanban_api.core.errors import AlreadyExistsError, NotFoundError
from kanban_api.repositories.locking import ReadWriteLock
from kanban_api.repositories.memory import MemoryBoardRepository, MemoryUserRepository


def test_user_create_and_lookup(clock):
    repo = MemoryUserRepository(clock=clock)
    user = repo.create("alice@example.com", "hash")

    assert len(user.id) == 36
    assert user.created_at == clock.now
    assert repo.get_by_email("alice@example.com") == user
    assert repo.get_by_id(user.id) == user


def test_user_duplicate_email_rejected():
    repo = MemoryUserRepository()
    repo.create("alice@example.com", "hash")

    with pytest.raises(AlreadyExistsError):
        repo.create("alice@example.com", "other-hash")


def test_user_missing_lookups_raise_not_found():
    repo = MemoryUserRepository()

    with pytest.raises(NotFoundError):
        repo.get_by_email("nobody@example.com")
    with pytest.raises(NotFoundError):
        repo.get_by_id("missing")


def test_concurrent_registrations_with_same_email_create_one_user():
    repo = MemoryUserRepository()
    barrier = threading.Barrier(16)

    def attempt(_):
        barrier.wait()
        try:
            return repo.create("race@example.com", "hash")
        except AlreadyExistsError:
            return None

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(attempt, range(16)))

    created = [user for user in results if user is not None]
    assert len(created) == 1
    assert repo.get_by_email("race@example.com") == created[0]


def test_board_crud(clock):
    repo = MemoryBoardRepository(clock=clock)
    board = repo.create("Sprint 1")
    assert board.created_at == board.updated_at == clock.now
    assert repo.get(board.id) == board

    clock.advance(minutes=5)
    updated = repo.update(board.id, "Sprint One")
    assert updated.title == "Sprint One"
    assert updated.created_at == board.created_at
    assert updated.updated_at > board.updated_at

    repo.delete(board.id)
    with pytest.raises(NotFoundError):
        repo.get(board.id)


def test_board_missing_ids_raise_not_found():
    repo = MemoryBoardRepository()

    with pytest.raises(NotFoundError):
        repo.get("missing")
    with pytest.raises(NotFoundError):
        repo.update("missing", "title")
    with pytest.raises(NotFoundError):
        repo.delete("missing")


def test_board_list_is_newest_first(clock):
    repo = MemoryBoardRepository(clock=clock)
    first = repo.create("first")
    clock.advance(seconds=1)
    second = repo.create("second")
    clock.advance(seconds=1)
    third = repo.create("third")

    assert [b.id for b in repo.list()] == [third.id, second.id, first.id]


def test_board_list_ties_are_newest_inserted_first(clock):
    repo = MemoryBoardRepository(clock=clock)
    first = repo.create("first")
    second = repo.create("second")

    assert [b.id for b in repo.list()] == [second.id, first.id]


def test_concurrent_board_mutations_leave_consistent_records():
    repo = MemoryBoardRepository()
    seeded = [repo.create(f"board {i}") for i in range(20)]
    stop = threading.Event()
    errors = []

    def reader():
        while not stop.is_set():
            for board in repo.list():
                if not board.title or board.updated_at < board.created_at:
                    errors.append(board)

    def writer(worker):
        for round_ in range(50):
            target = seeded[(worker + round_) % len(seeded)]
            try:
                repo.update(target.id, f"worker {worker} round {round_}")
            except NotFoundError:
                pass
            created = repo.create(f"new {worker}-{round_}")
            if round_ % 2 == 0:
                repo.delete(created.id)

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for thread in readers:
        thread.start()
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(writer, range(8)))
    stop.set()
    for thread in readers:
        thread.join()

    assert errors == []
    # 20 seeded + 8 workers * 25 surviving creations
    assert len(repo.list()) == 20 + 8 * 25


def test_read_write_lock_allows_parallel_readers():
    lock = ReadWriteLock()
    inside = threading.Barrier(3, timeout=5)

    def read():
        with lock.read():
            # Fails with BrokenBarrierError unless all three readers hold the lock together
            inside.wait()

    threads = [threading.Thread(target=read) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert not inside.broken


def test_read_write_lock_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []
    writer_holding = threading.Event()
    release_writer = threading.Event()

    def write():
        with lock.write():
            writer_holding.set()
            release_writer.wait(timeout=5)
            events.append("write-done")

    def read():
        writer_holding.wait(timeout=5)
        with lock.read():
            events.append("read")

    writer = threading.Thread(target=write)
    reader = threading.Thread(target=read)
    writer.start()
    reader.start()
    writer_holding.wait(timeout=5)
    release_writer.set()
    writer.join()
    reader.join()

    assert events == ["write-done", "read"]
