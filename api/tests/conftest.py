from typing import Dict, Generator, List, Optional, Tuple

import pytest
from app.application.errors.exceptions import ContentNotFoundError
from app.application.services.auth_service import AuthService
from app.application.services.file_service import FileService
from app.application.services.status_service import StatusService
from app.domain.models.file import THUMBNAIL_WIDTHS, File
from app.domain.models.health_status import HealthStatus
from app.domain.models.job import Job, JobDelivery
from app.domain.models.notification import Notification
from app.domain.models.user import User
from app.interfaces.service_dependencies import (
    get_auth_service,
    get_file_service,
    get_status_service,
)
from app.main import app
from fastapi.testclient import TestClient
from redis.exceptions import ResponseError


@pytest.fixture()
def client() -> Generator[TestClient, None, None]:
    """
    创建 TestClient 客户端。
    不进入上下文管理器，避免lifespan连接真实的数据库和Redis，依赖统一通过dependency_overrides替换
    :return: TestClient
    """
    c = TestClient(app)
    try:
        yield c
    finally:
        app.dependency_overrides.clear()


# ============ 数据库 ============


class FakeDatabase:
    """内存数据库，UoW退出时才把暂存的写入合并进来，fail_on_commit只影响有写入的提交"""

    def __init__(self) -> None:
        self.files: Dict[str, File] = {}
        self.users: Dict[str, User] = {}
        self.fail_on_commit = False
        self.commits = 0

    def uow_factory(self) -> "FakeUnitOfWork":
        return FakeUnitOfWork(self)


class FakeFileRepo:
    def __init__(self, db: FakeDatabase, staged: Dict[str, File]) -> None:
        self._db = db
        self._staged = staged

    def _all(self) -> Dict[str, File]:
        return {**self._db.files, **self._staged}

    async def save(self, file: File) -> None:
        self._staged[file.id] = file.model_copy()

    async def get_by_id(self, file_id: str) -> Optional[File]:
        file = self._all().get(file_id)
        return file.model_copy() if file else None

    async def get_by_id_and_owner(self, file_id: str, user_id: str) -> Optional[File]:
        file = await self.get_by_id(file_id)
        return file if file and file.user_id == user_id else None

    async def list_by_parent(
        self,
        user_id: str,
        parent_id: Optional[str],
        skip: int = 0,
        limit: int = 20,
    ) -> List[File]:
        files = [
            f
            for f in self._all().values()
            if f.user_id == user_id and f.parent_id == parent_id
        ]
        files.sort(key=lambda f: f.id, reverse=True)
        return [f.model_copy() for f in files[skip : skip + limit]]

    async def count(self) -> int:
        return len(self._all())


class FakeUserRepo:
    def __init__(self, db: FakeDatabase, staged: Dict[str, User]) -> None:
        self._db = db
        self._staged = staged

    def _all(self) -> Dict[str, User]:
        return {**self._db.users, **self._staged}

    async def create(self, user: User) -> User:
        self._staged[user.id] = user
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._all().get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._all().values() if u.email == email), None)

    async def count(self) -> int:
        return len(self._all())


class FakeUnitOfWork:
    def __init__(self, db: FakeDatabase) -> None:
        self._db = db
        self._staged_files: Dict[str, File] = {}
        self._staged_users: Dict[str, User] = {}
        self.file = FakeFileRepo(db, self._staged_files)
        self.user = FakeUserRepo(db, self._staged_users)

    async def commit(self) -> None:
        if self._db.fail_on_commit and (self._staged_files or self._staged_users):
            raise RuntimeError("commit failed")
        self._db.files.update(self._staged_files)
        self._db.users.update(self._staged_users)
        self._db.commits += 1

    async def rollback(self) -> None:
        self._staged_files.clear()
        self._staged_users.clear()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            await self.rollback()
            return None
        await self.commit()
        return None


# ============ 文件内容存储 ============


class MemoryFileStorage:
    def __init__(self) -> None:
        self.blobs: Dict[Tuple[str, Optional[int]], bytes] = {}
        self.deleted: List[str] = []
        self.fail_on_put = False
        self._seq = 0

    async def put(self, data: bytes) -> str:
        if self.fail_on_put:
            raise OSError("disk full")
        self._seq += 1
        content_ref = f"ref-{self._seq}"
        self.blobs[(content_ref, None)] = data
        return content_ref

    async def get(self, content_ref: str, width: Optional[int] = None) -> bytes:
        try:
            return self.blobs[(content_ref, width)]
        except KeyError:
            raise ContentNotFoundError(content_ref)

    async def put_derivative(self, content_ref: str, width: int, data: bytes) -> None:
        self.blobs[(content_ref, width)] = data

    async def delete(self, content_ref: str) -> None:
        self.deleted.append(content_ref)
        self.blobs.pop((content_ref, None), None)
        for width in THUMBNAIL_WIDTHS:
            self.blobs.pop((content_ref, width), None)


# ============ 任务队列 / 会话 / 通知 ============


class FakeJobQueue:
    def __init__(self, name: str) -> None:
        self._name = name
        self.jobs: List[Job] = []
        self.deliveries: List[JobDelivery] = []
        self.acked: List[str] = []
        self.dead_lettered: List[Tuple[str, str]] = []
        self.fail_on_enqueue = False

    @property
    def name(self) -> str:
        return self._name

    async def ensure_group(self) -> None:
        return None

    async def enqueue(self, job: Job) -> str:
        if self.fail_on_enqueue:
            raise ConnectionError("queue unavailable")
        self.jobs.append(job)
        return f"{len(self.jobs)}-0"

    async def reserve(
        self, consumer: str, block_ms: Optional[int] = None
    ) -> Optional[JobDelivery]:
        return self.deliveries.pop(0) if self.deliveries else None

    async def ack(self, message_id: str) -> None:
        self.acked.append(message_id)

    async def dead_letter(self, delivery: JobDelivery, reason: str) -> None:
        self.dead_lettered.append((delivery.message_id, reason))
        await self.ack(delivery.message_id)


class FakeSessionStore:
    def __init__(self) -> None:
        self.sessions: Dict[str, str] = {}
        self._seq = 0

    async def create(self, user_id: str) -> str:
        self._seq += 1
        token = f"token-{self._seq}"
        self.sessions[token] = user_id
        return token

    async def resolve(self, token: str) -> Optional[str]:
        return self.sessions.get(token) if token else None

    async def revoke(self, token: str) -> None:
        self.sessions.pop(token, None)


class FakeNotificationSink:
    def __init__(self) -> None:
        self.sent: List[Notification] = []
        self.error: Optional[Exception] = None

    async def send(self, notification: Notification) -> None:
        if self.error:
            raise self.error
        self.sent.append(notification)


# ============ Redis ============


class FakeRedis:
    """覆盖会话与消息流用到的命令，now为毫秒级的模拟时钟"""

    def __init__(self) -> None:
        self.now = 0
        self.values: Dict[str, str] = {}
        self.expires: Dict[str, int] = {}
        self.streams: Dict[str, List[Tuple[str, Dict[str, str]]]] = {}
        self.groups: Dict[Tuple[str, str], Dict] = {}
        self._seq = 0

    async def ping(self) -> bool:
        return True

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        self.values[key] = value
        if ex is not None:
            self.expires[key] = ex
        return True

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.values.pop(key, None) is not None:
                removed += 1
            self.expires.pop(key, None)
        return removed

    async def xgroup_create(self, name, groupname, id="$", mkstream=False):
        if name not in self.streams:
            if not mkstream:
                raise ResponseError("ERR The XGROUP subcommand requires the key to exist")
            self.streams[name] = []
        if (name, groupname) in self.groups:
            raise ResponseError("BUSYGROUP Consumer Group name already exists")
        self.groups[(name, groupname)] = {"last": 0, "pending": {}}
        return True

    async def xadd(self, name, fields):
        self._seq += 1
        message_id = f"{self._seq}-0"
        self.streams.setdefault(name, []).append((message_id, dict(fields)))
        return message_id

    async def xlen(self, name) -> int:
        return len(self.streams.get(name, []))

    def _fields(self, name, message_id):
        for entry_id, fields in self.streams.get(name, []):
            if entry_id == message_id:
                return fields
        return None

    async def xreadgroup(self, groupname, consumername, streams, count=None, block=None):
        result = []
        for name in streams:
            group = self.groups[(name, groupname)]
            entries = [
                (entry_id, fields)
                for entry_id, fields in self.streams.get(name, [])
                if int(entry_id.split("-")[0]) > group["last"]
            ][: count or None]
            if not entries:
                continue
            for entry_id, _ in entries:
                group["last"] = int(entry_id.split("-")[0])
                group["pending"][entry_id] = {
                    "consumer": consumername,
                    "delivered_at": self.now,
                    "times_delivered": 1,
                }
            result.append([name, entries])
        return result

    async def xautoclaim(
        self, name, groupname, consumername, min_idle_time, start_id="0-0", count=None
    ):
        group = self.groups[(name, groupname)]
        claimed = []
        for entry_id, info in sorted(
            group["pending"].items(), key=lambda item: int(item[0].split("-")[0])
        ):
            if self.now - info["delivered_at"] < min_idle_time:
                continue
            info["consumer"] = consumername
            info["delivered_at"] = self.now
            info["times_delivered"] += 1
            claimed.append((entry_id, self._fields(name, entry_id)))
            if count and len(claimed) >= count:
                break
        return ["0-0", claimed, []]

    async def xpending_range(self, name, groupname, min, max, count, consumername=None):
        group = self.groups[(name, groupname)]
        info = group["pending"].get(min)
        if not info:
            return []
        return [
            {
                "message_id": min,
                "consumer": info["consumer"],
                "time_since_delivered": self.now - info["delivered_at"],
                "times_delivered": info["times_delivered"],
            }
        ]

    async def xack(self, name, groupname, *ids) -> int:
        pending = self.groups[(name, groupname)]["pending"]
        return sum(1 for message_id in ids if pending.pop(message_id, None))

    async def xdel(self, name, *ids) -> int:
        before = len(self.streams.get(name, []))
        self.streams[name] = [e for e in self.streams.get(name, []) if e[0] not in ids]
        return before - len(self.streams[name])


class FakeRedisClient:
    def __init__(self) -> None:
        self.client = FakeRedis()


# ============ fixtures ============


@pytest.fixture()
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def storage() -> MemoryFileStorage:
    return MemoryFileStorage()


@pytest.fixture()
def thumbnail_queue() -> FakeJobQueue:
    return FakeJobQueue("thumbnail_generation")


@pytest.fixture()
def welcome_queue() -> FakeJobQueue:
    return FakeJobQueue("email_sending")


@pytest.fixture()
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture()
def redis_client() -> FakeRedisClient:
    return FakeRedisClient()


@pytest.fixture()
def notification_sink() -> FakeNotificationSink:
    return FakeNotificationSink()


class StaticChecker:
    def __init__(self, service_name: str, ok: bool = True) -> None:
        self.service_name = service_name
        self.ok = ok

    async def check(self) -> HealthStatus:
        return HealthStatus(service=self.service_name, status="ok" if self.ok else "error")


@pytest.fixture()
def api(client, db, storage, session_store, thumbnail_queue, welcome_queue) -> TestClient:
    """替换所有服务依赖为内存实现的 TestClient"""
    app.dependency_overrides[get_auth_service] = lambda: AuthService(
        uow_factory=db.uow_factory,
        session_store=session_store,
        welcome_queue=welcome_queue,
    )
    app.dependency_overrides[get_file_service] = lambda: FileService(
        uow_factory=db.uow_factory,
        file_storage=storage,
        thumbnail_queue=thumbnail_queue,
    )
    app.dependency_overrides[get_status_service] = lambda: StatusService(
        checkers=[StaticChecker("redis"), StaticChecker("db", ok=False)],
        uow_factory=db.uow_factory,
    )
    return client
