import json
import sqlite3
import threading
import uuid
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ...domain.errors import PostNotFoundError, UserAlreadyExistsError, UsernameTakenError
from ...domain.models import Comment, Gender, Like, Post, User, UserRole
from ...domain.ports.persistence import PersistenceGateway


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway.

    Posts are stored as one row per document; likes and comments live in JSON
    columns so that every mutation of the aggregate is a single UPDATE.
    """

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._lock, self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    username TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    role TEXT NOT NULL DEFAULT 'user',
                    date_of_birth TEXT,
                    gender TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS posts (
                    id TEXT PRIMARY KEY,
                    author_id INTEGER NOT NULL,
                    text TEXT,
                    image TEXT,
                    likes TEXT NOT NULL DEFAULT '[]',
                    comments TEXT NOT NULL DEFAULT '[]',
                    version INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    FOREIGN KEY(author_id) REFERENCES users(id)
                );

                CREATE INDEX IF NOT EXISTS idx_posts_created_at
                    ON posts(created_at DESC);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # UserRepository API ----------------------------------------------------
    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email.lower(),))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def username_exists(self, username: str) -> bool:
        with self._lock:
            cur = self._conn.execute("SELECT 1 FROM users WHERE username = ?", (username,))
            return cur.fetchone() is not None

    def create_user(
        self,
        name: str,
        email: str,
        username: str,
        password_hash: str,
        date_of_birth: Optional[date] = None,
        gender: Optional[Gender] = None,
    ) -> User:
        normalized = email.lower()
        now = self._now()
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO users (
                        name, email, username, password_hash, role,
                        date_of_birth, gender, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        name,
                        normalized,
                        username,
                        password_hash,
                        UserRole.USER.value,
                        date_of_birth.isoformat() if date_of_birth else None,
                        gender.value if gender else None,
                        now,
                        now,
                    ),
                )
                user_id = cur.lastrowid
                cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
                row = cur.fetchone()
        except sqlite3.IntegrityError as exc:
            if "users.username" in str(exc):
                raise UsernameTakenError() from exc
            raise UserAlreadyExistsError() from exc
        if not row:
            raise RuntimeError("Failed to persist user.")
        return self._row_to_user(row)

    def update_user_role(self, user_id: int, role: UserRole) -> User:
        now = self._now()
        with self._lock, self._conn:
            self._conn.execute(
                "UPDATE users SET role = ?, updated_at = ? WHERE id = ?",
                (role.value, now, user_id),
            )
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        if not row:
            raise ValueError(f"User {user_id} not found.")
        return self._row_to_user(row)

    # PostRepository API ----------------------------------------------------
    def create_post(
        self,
        author_id: int,
        text: Optional[str],
        image: Optional[str],
        created_at: datetime,
    ) -> Post:
        post_id = uuid.uuid4().hex
        now = self._format_datetime(created_at)
        with self._lock, self._conn:
            self._conn.execute(
                """
                INSERT INTO posts (id, author_id, text, image, likes, comments, version, created_at, updated_at)
                VALUES (?, ?, ?, ?, '[]', '[]', 0, ?, ?)
                """,
                (post_id, author_id, text, image, now, now),
            )
            cur = self._conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,))
            row = cur.fetchone()
        if not row:
            raise RuntimeError("Failed to persist post.")
        return self._row_to_post(row)

    def get_post(self, post_id: str) -> Optional[Post]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,))
            row = cur.fetchone()
        return self._row_to_post(row) if row else None

    def list_posts(self) -> List[Post]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM posts ORDER BY created_at DESC, rowid DESC")
            rows = cur.fetchall()
        return [self._row_to_post(row) for row in rows]

    def mutate_post(self, post_id: str, mutation: Callable[[Post], Post]) -> Optional[Post]:
        with self._lock, self._conn:
            cur = self._conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,))
            row = cur.fetchone()
            if not row:
                raise PostNotFoundError()
            current = self._row_to_post(row)
            post = mutation(current)
            # The version guard only trips when another connection to the same
            # file wrote between the read above and this update.
            cur = self._conn.execute(
                """
                UPDATE posts
                SET text = ?, image = ?, likes = ?, comments = ?,
                    updated_at = ?, version = version + 1
                WHERE id = ? AND version = ?
                """,
                (
                    post.text,
                    post.image,
                    json.dumps([self._like_to_dict(like) for like in post.likes]),
                    json.dumps([self._comment_to_dict(comment) for comment in post.comments]),
                    self._format_datetime(post.updated_at),
                    post_id,
                    current.version,
                ),
            )
            if cur.rowcount == 0:
                return None
            cur = self._conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,))
            row = cur.fetchone()
        return self._row_to_post(row)

    def delete_post(self, post_id: str) -> bool:
        with self._lock, self._conn:
            cur = self._conn.execute("DELETE FROM posts WHERE id = ?", (post_id,))
            return cur.rowcount > 0

    # Helpers ----------------------------------------------------------------
    @classmethod
    def _now(cls) -> str:
        # Microseconds are kept so the feed order stays stable within a second.
        return cls._format_datetime(datetime.now(timezone.utc))

    @staticmethod
    def _format_datetime(value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _parse_datetime(value: str) -> datetime:
        result = datetime.fromisoformat(value)
        if result.tzinfo is None:
            return result.replace(tzinfo=timezone.utc)
        return result.astimezone(timezone.utc)

    def _like_to_dict(self, like: Like) -> Dict[str, Any]:
        return {"user_id": like.user_id}

    def _comment_to_dict(self, comment: Comment) -> Dict[str, Any]:
        return {
            "id": comment.id,
            "author_id": comment.author_id,
            "text": comment.text,
            "created_at": self._format_datetime(comment.created_at),
        }

    def _row_to_post(self, row: sqlite3.Row) -> Post:
        likes = [Like(user_id=item["user_id"]) for item in json.loads(row["likes"])]
        comments = [
            Comment(
                id=item["id"],
                author_id=item["author_id"],
                text=item["text"],
                created_at=self._parse_datetime(item["created_at"]),
            )
            for item in json.loads(row["comments"])
        ]
        return Post(
            id=row["id"],
            author_id=row["author_id"],
            text=row["text"],
            image=row["image"],
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
            likes=likes,
            comments=comments,
            version=row["version"],
        )

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            username=row["username"],
            password_hash=row["password_hash"],
            role=UserRole(row["role"]),
            date_of_birth=date.fromisoformat(row["date_of_birth"]) if row["date_of_birth"] else None,
            gender=Gender(row["gender"]) if row["gender"] else None,
            created_at=self._parse_datetime(row["created_at"]),
            updated_at=self._parse_datetime(row["updated_at"]),
        )
