#!/usr/bin/env python3
"""
manager.py
--------------------
Database manager for the Folio portfolio backend.

Provides the FolioDB class, the single entry point to the SQLite
database. The application entry point (CLI, ASGI factory, tests) builds
one instance and passes it on; there is no module-level instance.

Handles:
    - Engine and session factory setup (or an injected engine)
    - SQLite pragmas on every new connection (WAL, foreign keys)
    - Transactional session scopes exposing the entity managers
    - Schema creation and Alembic migrations
    - Best-effort column migrations for older database files
    - Seeding of default content
    - Integrity validation and full reset

Core Operations:
    Schema:
        - initialize_schema: create_all + stamp on a fresh file, upgrade otherwise
        - apply_column_migrations: add columns missing from older files
        - upgrade_database / get_migration_history

    Content:
        - seed: default site config, skills, admin user and samples
        - initialize: schema then seed

    Maintenance:
        - validate: integrity and foreign key checks
        - reset: drop everything, recreate and reseed

Usage:
    db = FolioDB(DB_PATH, ALEMBIC_DIR, log_dir=LOG_DIR)
    db.initialize()
    with db.session_scope():
        featured = db.projects.get_featured()
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import threading
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

# --- Third party ---
from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from sqlalchemy import Engine, create_engine, event, inspect, text
from sqlalchemy.orm import Session, sessionmaker

# --- Local imports ---
from folio.core.config import Settings
from folio.core.exceptions import DatabaseError
from folio.core.logging_manager import FolioLogger, safe_logger, setup_logger
from folio.core.paths import ALEMBIC_DIR, DB_PATH
from .decorators import handle_db_errors, log_database_operation
from .managers import (
    BlogPostManager,
    ContentStatsManager,
    MediaManager,
    ProjectManager,
    SkillManager,
    TagManager,
    UserManager,
)
from .models import Base
from .seeder import Seeder

REQUIRED_TABLES = (
    "projects",
    "blog_posts",
    "skills",
    "tags",
    "users",
    "media_files",
    "site_config",
    "project_skills",
    "blog_post_tags",
)

# (table, column, DDL) added to database files created by older releases
COLUMN_MIGRATIONS: List[Tuple[str, str, str]] = [
    ("projects", "short_description", "TEXT"),
    ("projects", "image_url", "VARCHAR(500)"),
    ("projects", "challenges", "TEXT NOT NULL DEFAULT '[]'"),
    ("projects", "solutions", "TEXT NOT NULL DEFAULT '[]'"),
    ("projects", "skills_demonstrated", "TEXT NOT NULL DEFAULT '[]'"),
    ("projects", "meta_description", "TEXT"),
    ("blog_posts", "featured_image", "VARCHAR(500)"),
    ("blog_posts", "meta_description", "TEXT"),
    ("skills", "icon_url", "VARCHAR(500)"),
    ("skills", "years_experience", "INTEGER"),
    ("media_files", "duration", "FLOAT"),
]


# ----- Main Database Manager -----
class FolioDB:
    """
    Main database manager for the Folio database.

    Attributes:
        db_path: Filesystem path to the SQLite database file
        alembic_dir: Path to the Alembic script directory
        engine: SQLAlchemy engine instance
        SessionLocal: SQLAlchemy session factory
        settings: Runtime settings (seed admin, upload directory)

    Manager properties (db.projects, db.blog_posts, ...) are bound to the
    session of the innermost session_scope() of the calling thread.
    """

    # ---- Initialization ----
    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        alembic_dir: Optional[Union[str, Path]] = None,
        log_dir: Optional[Union[str, Path]] = None,
        engine: Optional[Engine] = None,
        upload_dir: Optional[Union[str, Path]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """
        Initialize database engine and session factory.

        Args:
            db_path: Path to the SQLite file (default: DATABASE_PATH)
            alembic_dir: Path to the Alembic directory
            log_dir: Directory for log files (optional)
            engine: Pre-built engine to use instead of opening db_path
            upload_dir: Directory for uploaded media
            settings: Runtime settings (default: from environment)
        """
        self.db_path = Path(db_path or DB_PATH).expanduser().resolve()
        self.alembic_dir = Path(alembic_dir or ALEMBIC_DIR).expanduser().resolve()
        self.settings = settings or Settings.from_env()
        self.upload_dir = Path(upload_dir or self.settings.upload_dir)

        self.logger: Optional[FolioLogger] = setup_logger(
            Path(log_dir) / "system" if log_dir else None, "database"
        )

        self._local = threading.local()
        self._setup_engine(engine)

    def _setup_engine(self, engine: Optional[Engine]) -> None:
        """Create (or adopt) the engine and build the session factory."""
        log = safe_logger(self.logger)
        try:
            log.log_operation(
                "database_init_start",
                {"db_path": str(self.db_path), "injected_engine": engine is not None},
            )

            if engine is None:
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                engine = create_engine(
                    f"sqlite:///{self.db_path}",
                    echo=False,
                    future=True,
                    pool_pre_ping=True,
                    connect_args={"check_same_thread": False},
                )

            self.engine: Engine = engine
            if self.engine.dialect.name == "sqlite":
                event.listen(self.engine, "connect", _set_sqlite_pragmas)

            self.SessionLocal: sessionmaker = sessionmaker(
                bind=self.engine,
                autoflush=True,
                expire_on_commit=False,
                future=True,
            )

            self.alembic_cfg: Config = self._setup_alembic()
            log.log_operation("database_init_complete", {"success": True})

        except Exception as e:
            log.log_error(e, {"operation": "database_init"})
            raise DatabaseError(f"Database initialization failed: {e}")

    # ---- Session Management ----
    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """
        Provide a transactional scope around a series of operations.

        Commits on success, rolls back and re-raises on error, always
        closes. Entity managers are bound to this session while the
        scope is open.

        Usage:
            with db.session_scope() as session:
                post = db.blog_posts.create({"title": "Hello"})
        """
        session = self.SessionLocal()
        session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log = safe_logger(self.logger)

        stack = self._manager_stack()
        stack.append(self._build_managers(session))
        log.log_debug("session_start", {"session_id": session_id})

        try:
            yield session
            session.commit()
            log.log_debug("session_commit", {"session_id": session_id})
        except Exception as e:
            session.rollback()
            log.log_error(e, {"operation": "session_rollback", "session_id": session_id})
            raise
        finally:
            stack.pop()
            session.close()
            log.log_debug("session_close", {"session_id": session_id})

    def get_session(self) -> Session:
        """Create and return a new SQLAlchemy session (caller closes it)."""
        return self.SessionLocal()

    def _manager_stack(self) -> List[Dict[str, Any]]:
        stack = getattr(self._local, "stack", None)
        if stack is None:
            stack = self._local.stack = []
        return stack

    def _build_managers(self, session: Session) -> Dict[str, Any]:
        return {
            "projects": ProjectManager(session, self.logger),
            "blog_posts": BlogPostManager(session, self.logger),
            "skills": SkillManager(session, self.logger),
            "tags": TagManager(session, self.logger),
            "media": MediaManager(session, self.logger, upload_dir=self.upload_dir),
            "users": UserManager(session, self.logger),
            "stats": ContentStatsManager(session, self.logger),
        }

    def _manager(self, name: str):
        stack = self._manager_stack()
        if not stack:
            raise DatabaseError(
                f"db.{name} requires an active session. "
                f"Use within session_scope: with db.session_scope(): db.{name}..."
            )
        return stack[-1][name]

    # ---- Entity managers ----
    @property
    def projects(self) -> ProjectManager:
        """ProjectManager bound to the current session scope."""
        return self._manager("projects")

    @property
    def blog_posts(self) -> BlogPostManager:
        """BlogPostManager bound to the current session scope."""
        return self._manager("blog_posts")

    @property
    def skills(self) -> SkillManager:
        return self._manager("skills")

    @property
    def tags(self) -> TagManager:
        return self._manager("tags")

    @property
    def media(self) -> MediaManager:
        return self._manager("media")

    @property
    def users(self) -> UserManager:
        return self._manager("users")

    @property
    def stats(self) -> ContentStatsManager:
        """Cross-entity statistics, search and dashboard queries."""
        return self._manager("stats")

    # ---- Alembic ----
    def _setup_alembic(self) -> Config:
        """Build an Alembic configuration without an ini file."""
        alembic_cfg = Config()
        alembic_cfg.set_main_option("script_location", str(self.alembic_dir))
        alembic_cfg.set_main_option(
            "sqlalchemy.url", self.engine.url.render_as_string(hide_password=False)
        )
        alembic_cfg.set_main_option(
            "file_template",
            "%%(year)d%%(month).2d%%(day).2d_%%(hour).2d%%(minute).2d_%%(slug)s",
        )
        return alembic_cfg

    def _run_alembic(self, operation, *args: Any, **kwargs: Any) -> None:
        """Run an Alembic command on a connection of this engine."""
        with self.engine.begin() as connection:
            self.alembic_cfg.attributes["connection"] = connection
            try:
                operation(self.alembic_cfg, *args, **kwargs)
            finally:
                self.alembic_cfg.attributes.pop("connection", None)

    @handle_db_errors
    @log_database_operation("upgrade_database")
    def upgrade_database(self, revision: str = "head") -> None:
        """
        Upgrade the database schema to the given Alembic revision.

        Args:
            revision: Target revision (default: 'head')
        """
        try:
            self._run_alembic(command.upgrade, revision)
        except Exception as e:
            raise DatabaseError(f"Database upgrade failed: {e}")

    def get_migration_history(self) -> Dict[str, Optional[str]]:
        """
        Get the current migration status of the database.

        Returns:
            Dictionary with 'current_revision' and 'status'
            ('up_to_date' or 'needs_migration'), or 'error'
        """
        try:
            with self.engine.connect() as conn:
                context = MigrationContext.configure(conn)
                current_rev = context.get_current_revision()

            return {
                "current_revision": current_rev,
                "status": "up_to_date" if current_rev else "needs_migration",
            }
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "get_migration_history"})
            return {"error": str(e)}

    # ---- Schema ----
    def _table_names(self) -> List[str]:
        return inspect(self.engine).get_table_names()

    @handle_db_errors
    @log_database_operation("initialize_schema")
    def initialize_schema(self) -> List[str]:
        """
        Create or upgrade the schema.

        Actions:
            Fresh database: create every table and stamp Alembic head
            Existing database: run pending migrations, create any missing
            table, then add missing columns

        Returns:
            Columns added by apply_column_migrations()
        """
        log = safe_logger(self.logger)
        tables = [t for t in self._table_names() if t != "alembic_version"]

        if not tables:
            Base.metadata.create_all(bind=self.engine)
            try:
                self._run_alembic(command.stamp, "head")
            except Exception as e:
                log.log_warning("alembic_stamp_failed", {"error": str(e)})
            log.log_operation(
                "fresh_database_created",
                {"tables_created": len(Base.metadata.tables)},
            )
        else:
            try:
                self.upgrade_database()
            except Exception as e:
                # Files created before Alembic tracking have no version row
                log.log_warning("database_upgrade_failed", {"error": str(e)})
                Base.metadata.create_all(bind=self.engine, checkfirst=True)
                try:
                    self._run_alembic(command.stamp, "head")
                except Exception as stamp_error:
                    log.log_warning("alembic_stamp_failed", {"error": str(stamp_error)})
            log.log_operation("existing_database_migrated", {"table_count": len(tables)})

        return self.apply_column_migrations()

    def apply_column_migrations(self) -> List[str]:
        """
        Add known columns missing from older database files.

        Failures are logged as warnings and never raised.

        Returns:
            'table.column' for every column added
        """
        log = safe_logger(self.logger)
        added: List[str] = []
        try:
            inspector = inspect(self.engine)
            existing_tables = set(inspector.get_table_names())
        except Exception as e:
            log.log_warning("column_migration_inspect_failed", {"error": str(e)})
            return added

        for table, column, ddl in COLUMN_MIGRATIONS:
            if table not in existing_tables:
                continue
            try:
                columns = {c["name"] for c in inspector.get_columns(table)}
                if column in columns:
                    continue
                with self.engine.begin() as conn:
                    conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {ddl}"))
                added.append(f"{table}.{column}")
            except Exception as e:
                log.log_warning(
                    "column_migration_failed",
                    {"table": table, "column": column, "error": str(e)},
                )

        if added:
            log.log_operation("column_migrations_applied", {"columns": added})
        return added

    # ---- Content ----
    def seed(self, include_samples: bool = True) -> Dict[str, int]:
        """
        Seed default rows into empty tables.

        Args:
            include_samples: Also insert the sample projects and posts

        Returns:
            Rows inserted per table
        """
        with self.session_scope() as session:
            return Seeder(session, self.settings, self.logger).run(include_samples)

    def initialize(self, seed: bool = True) -> Dict[str, Any]:
        """
        Prepare the database for use: schema first, then seed data.

        Seed failures are logged as warnings; the schema is kept.

        Returns:
            {'columns_added': [...], 'seeded': {...}}
        """
        result: Dict[str, Any] = {
            "columns_added": self.initialize_schema(),
            "seeded": {},
        }
        if seed:
            try:
                result["seeded"] = self.seed()
            except Exception as e:
                safe_logger(self.logger).log_warning("seed_failed", {"error": str(e)})
        return result

    # ---- Maintenance ----
    def validate(self) -> Dict[str, Any]:
        """
        Check database integrity.

        Runs PRAGMA integrity_check and foreign_key_check and confirms
        every required table exists.

        Returns:
            {'valid': bool, 'issues': [str, ...]}
        """
        issues: List[str] = []
        try:
            with self.engine.connect() as conn:
                integrity = [row[0] for row in conn.execute(text("PRAGMA integrity_check"))]
                if integrity != ["ok"]:
                    issues.extend(f"Integrity: {msg}" for msg in integrity)

                for row in conn.execute(text("PRAGMA foreign_key_check")):
                    issues.append(
                        f"Foreign key violation in {row[0]} (rowid {row[1]}) -> {row[2]}"
                    )

            existing = set(self._table_names())
            issues.extend(
                f"Missing table: {table}"
                for table in REQUIRED_TABLES
                if table not in existing
            )
        except Exception as e:
            safe_logger(self.logger).log_error(e, {"operation": "validate"})
            issues.append(f"Validation failed: {e}")

        return {"valid": not issues, "issues": issues}

    @log_database_operation("reset_database")
    def reset(self, seed: bool = True) -> Dict[str, Any]:
        """Drop every table, then recreate the schema and reseed."""
        Base.metadata.drop_all(bind=self.engine)
        with self.engine.begin() as conn:
            conn.execute(text("DROP TABLE IF EXISTS alembic_version"))
        return self.initialize(seed=seed)

    def dispose(self) -> None:
        """Release every pooled connection."""
        self.engine.dispose()
        safe_logger(self.logger).log_debug("engine_disposed")

    def __enter__(self) -> "FolioDB":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    def __repr__(self) -> str:
        return f"<FolioDB(path={self.db_path})>"


def _set_sqlite_pragmas(dbapi_connection, connection_record) -> None:
    """Per-connection SQLite settings."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA busy_timeout=5000")
    cursor.close()
