import asyncio

import pytest
from app.application.errors.exceptions import ContentNotFoundError
from app.infrastructure.external.file_storage.local_file_storage import LocalFileStorage


def test_put_creates_directory_and_names_by_uuid(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path / "nested" / "files"))

    content_ref = asyncio.run(storage.put(b"hello"))

    path = tmp_path / "nested" / "files" / content_ref
    assert path.read_bytes() == b"hello"
    assert len(content_ref) == 36
    assert asyncio.run(storage.get(content_ref)) == b"hello"


def test_put_twice_gives_distinct_refs(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path))

    assert asyncio.run(storage.put(b"a")) != asyncio.run(storage.put(b"a"))


def test_derivative_is_suffixed_with_width(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path))
    content_ref = asyncio.run(storage.put(b"original"))

    asyncio.run(storage.put_derivative(content_ref, 250, b"v1"))
    asyncio.run(storage.put_derivative(content_ref, 250, b"v2"))

    assert (tmp_path / f"{content_ref}_250").read_bytes() == b"v2"
    assert asyncio.run(storage.get(content_ref, 250)) == b"v2"
    # 原子写入不留下临时文件
    assert sorted(p.name for p in tmp_path.iterdir()) == sorted(
        [content_ref, f"{content_ref}_250"]
    )


def test_missing_content_is_content_not_found(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path))
    content_ref = asyncio.run(storage.put(b"original"))

    with pytest.raises(ContentNotFoundError):
        asyncio.run(storage.get(content_ref, 500))
    with pytest.raises(ContentNotFoundError):
        asyncio.run(storage.get("0b5c7b2e-missing"))


def test_path_like_ref_is_rejected(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path / "files"))
    (tmp_path / "secret").write_bytes(b"secret")

    with pytest.raises(ContentNotFoundError):
        asyncio.run(storage.get("../secret"))


def test_delete_removes_original_and_derivatives(tmp_path) -> None:
    storage = LocalFileStorage(str(tmp_path))
    content_ref = asyncio.run(storage.put(b"original"))
    asyncio.run(storage.put_derivative(content_ref, 100, b"thumb"))

    asyncio.run(storage.delete(content_ref))
    # 重复删除不报错
    asyncio.run(storage.delete(content_ref))

    assert list(tmp_path.iterdir()) == []
