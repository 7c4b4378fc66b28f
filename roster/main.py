"""
Main entry point for the Roster service.
"""

import argparse
import logging
import sys
from typing import Optional

from fastapi import FastAPI

from .api.rest_api import RosterRestAPI
from .config import Settings, load_settings
from .core.exceptions import RosterException
from .persistence import DatabaseFactory, DatabaseManager
from .persistence.repositories import CourseRepository, StudentRepository, GradeRepository
from .services import RecordService


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one stream handler on the root logger."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)


class RosterPlatform:
    """Wires the store, repositories, record service and REST API together."""
    
    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or Settings()
        self._database: Optional[DatabaseManager] = None
        self._record_service: Optional[RecordService] = None
        self._rest_api: Optional[RosterRestAPI] = None
        
        self._initialize_platform()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def app(self) -> FastAPI:
        return self._rest_api.app

    @property
    def database(self) -> DatabaseManager:
        return self._database
    
    def _initialize_platform(self):
        """Open the store once and build everything that reads from it."""
        logger.info("Initializing Roster service...")
        
        self._database = DatabaseFactory.create_database(
            self._settings.database_type, **self._settings.database_config()
        )
        logger.info("✓ Database initialized: %s (%s)",
                    self._settings.database_type, self._settings.database_path)
        
        self._record_service = RecordService(
            CourseRepository(self._database),
            StudentRepository(self._database),
            GradeRepository(self._database),
        )
        
        self._rest_api = RosterRestAPI(
            self._database,
            self._record_service,
            frontend_url=self._settings.frontend_url,
        )
        logger.info("✓ REST API initialized (allowed origin %s)", self._settings.frontend_url)
    
    def serve(self):
        """Run the REST server until interrupted."""
        import uvicorn
        
        logger.info("🚀 Server running on %s:%d", self._settings.host, self._settings.port)
        try:
            uvicorn.run(
                self.app,
                host=self._settings.host,
                port=self._settings.port,
                log_level=self._settings.log_level.lower(),
                log_config=None,
            )
        finally:
            self.shutdown()

    def shutdown(self):
        if self._database is not None:
            self._database.close()
            logger.info("✓ Database connection closed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Application factory, usable with ``uvicorn --factory roster.main:create_app``."""
    return RosterPlatform(settings or load_settings()).app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Roster student, course and grade records service")
    parser.add_argument("--host", type=str, help="Interface to bind")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--database-path", type=str, help="SQLite database file")
    parser.add_argument("--frontend-url", type=str, help="Allowed CORS origin")
    parser.add_argument("--log-level", type=str, help="Logging level")
    parser.add_argument("--config", type=str, help="Configuration file path")
    return parser


def main(argv: Optional[list] = None):
    """Main entry point."""
    args = build_parser().parse_args(argv)
    
    try:
        settings = load_settings(args.config, {
            "host": args.host,
            "port": args.port,
            "database_path": args.database_path,
            "frontend_url": args.frontend_url,
            "log_level": args.log_level,
        })
        configure_logging(settings.log_level)
        platform = RosterPlatform(settings)
    except RosterException as e:
        logging.getLogger(__name__).error("❌ Startup failed: %s", e.message)
        sys.exit(1)
    
    try:
        platform.serve()
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
