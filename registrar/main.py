"""
Main entry point for the registrar.
"""

import json
import threading
import time
from typing import Any, Dict, Optional

from .api.rest_api import RegistrarRestAPI
from .core.exceptions import ConfigurationError
from .factory import RegistrarFactory
from .logging import get_logger, setup_logging
from .services import EnrollmentService, EventLog

logger = get_logger("main")

DEFAULT_CONFIG: Dict[str, Any] = {
    'default_enrollment_limit': None,
    'log_level': None,
    'log_dir': None,
    'host': "127.0.0.1",
    'port': 8000,
}


def load_config(config: Optional[dict] = None) -> Dict[str, Any]:
    """Merge a config dict over the defaults and validate it."""
    config = config or {}
    unknown = set(config) - set(DEFAULT_CONFIG)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

    merged = dict(DEFAULT_CONFIG)
    merged.update(config)

    if not isinstance(merged['port'], int) or isinstance(merged['port'], bool):
        raise ConfigurationError(f"port must be an integer: {merged['port']!r}")
    if not isinstance(merged['host'], str):
        raise ConfigurationError(f"host must be a string: {merged['host']!r}")
    return merged


def load_config_file(path: str) -> Dict[str, Any]:
    """Load a JSON configuration file."""
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return config


class RegistrarPlatform:
    """Wires the registry, enrollment service and REST API together."""

    def __init__(self, config: Optional[dict] = None):
        self._config = load_config(config)
        self._rest_thread = None
        self._running = False

        self._factory = RegistrarFactory(
            default_enrollment_limit=self._config['default_enrollment_limit']
        )
        self._event_log = EventLog()
        self._enrollment_service = EnrollmentService([self._event_log])
        self._rest_api = RegistrarRestAPI(self._factory, self._enrollment_service, self._event_log)
        logger.info("Registrar platform initialized")

    @property
    def factory(self) -> RegistrarFactory:
        return self._factory

    @property
    def enrollment_service(self) -> EnrollmentService:
        return self._enrollment_service

    @property
    def event_log(self) -> EventLog:
        return self._event_log

    @property
    def app(self):
        return self._rest_api.app

    @property
    def config(self) -> Dict[str, Any]:
        return dict(self._config)

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None):
        """Start the REST server in a background thread."""
        if self._running:
            logger.warning("REST server already running")
            return

        import uvicorn

        if host is None:
            host = self._config['host']
        if port is None:
            port = self._config['port']

        def run_server():
            uvicorn.run(
                self._rest_api.app,
                host=host,
                port=port,
                log_level="info"
            )

        self._rest_thread = threading.Thread(target=run_server, daemon=True)
        self._rest_thread.start()
        self._running = True

        logger.info("REST server started on http://%s:%s (docs at /docs)", host, port)

    def run_demo(self) -> Dict[str, Any]:
        """Run an in-process registration scenario and return statistics."""
        logger.info("Running registrar demonstration")

        course = self._factory.make_course("COMP 225", "Software Fun Fun", enrollment_limit=3)
        sally = self._factory.make_student("Sally")
        fred = self._factory.make_student("Fred")
        zongo = self._factory.make_student("Zongo Jr.")
        self._factory.enroll_multiple_students(course, 3)

        for student in (sally, fred, zongo):
            result = self._enrollment_service.enroll_student(student, course)
            logger.info("Enroll %s: %s", student, result.message)

        first = sorted(course.get_students(), key=str)[0]
        result = self._enrollment_service.drop_student(first, course)
        logger.info("Drop %s: promoted %s", first, result.metadata['promoted'])

        result = self._enrollment_service.change_enrollment_limit(course, 5)
        logger.info("Raise limit to 5: promoted %s", result.metadata['promoted'])

        self._factory.assert_invariants()

        statistics = self._enrollment_service.get_statistics()
        logger.info("Enrollment statistics: %s", statistics)
        return statistics


def main():
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Course registration server")
    parser.add_argument("--host", type=str, help="REST server host")
    parser.add_argument("--port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")

    args = parser.parse_args()

    config = {}
    if args.config:
        config = load_config_file(args.config)

    setup_logging(level=config.get('log_level'), log_dir=config.get('log_dir'))

    platform = RegistrarPlatform(config)

    try:
        if args.demo:
            statistics = platform.run_demo()
            print(json.dumps(statistics, indent=2))
        else:
            platform.start_rest_server(args.host, args.port)

            # Keep running
            logger.info("Registrar is running. Press Ctrl+C to stop.")
            while True:
                time.sleep(1)

    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
