"""
Neo4j connection management.

The graph store is where dashboard snapshots come from. One driver is kept per
connection name; repositories only see sessions and ``execute_query``.
"""

import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Dict, Optional, Any, Generator, List
from neo4j import GraphDatabase, Driver, Session
from neo4j.exceptions import ServiceUnavailable, AuthError

from ...config.settings import get_settings
from ...exceptions import DatabaseError, ConfigurationError
from ..monitoring.logger import get_logger


class DatabaseManager:
    """
    Process-wide Neo4j driver registry.

    Driver errors are translated into ``ConfigurationError`` (credentials)
    and ``DatabaseError`` (everything else).
    """

    _instance: Optional["DatabaseManager"] = None
    _lock = threading.RLock()

    def __new__(cls) -> "DatabaseManager":
        """Singleton pattern to ensure single connection manager."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.config = get_settings().database_config
        self.logger = get_logger(__name__)
        self._drivers: Dict[str, Driver] = {}
        self._initialized = True

    def get_driver(self, connection_name: str = "default") -> Driver:
        """
        Get the driver for a connection, connecting on first use.

        Raises:
            ConfigurationError: If credentials are missing or rejected
            DatabaseError: If the server cannot be reached
        """
        with self._lock:
            driver = self._drivers.get(connection_name)
            if driver is None:
                driver = self._connect()
                self._drivers[connection_name] = driver
            return driver

    def _connect(self) -> Driver:
        if not self.config['password']:
            raise ConfigurationError("NEO4J_PASSWORD is required to fetch snapshots")

        try:
            driver = GraphDatabase.driver(
                self.config['uri'],
                auth=(self.config['user'], self.config['password']),
                max_connection_pool_size=self.config['max_connections'],
                connection_acquisition_timeout=self.config['connection_timeout'],
            )
            driver.verify_connectivity()
        except AuthError as e:
            raise ConfigurationError(f"Neo4j rejected the credentials: {e}")
        except ServiceUnavailable as e:
            raise DatabaseError(f"Neo4j unavailable at {self.config['uri']}: {e}")
        except Exception as e:
            raise DatabaseError(f"Failed to connect to Neo4j: {e}")

        self.logger.info(f"Connected to Neo4j at {self.config['uri']}")
        return driver

    @contextmanager
    def get_session(self, connection_name: str = "default") -> Generator[Session, None, None]:
        """
        Open a session that is always closed again.

        Yields:
            Neo4j session
        """
        session = self.get_driver(connection_name).session()
        try:
            yield session
        finally:
            session.close()

    def execute_query(self,
                      query: str,
                      parameters: Optional[Dict[str, Any]] = None,
                      connection_name: str = "default") -> List[Any]:
        """
        Run a Cypher query and materialize every record.

        Args:
            query: Cypher query string
            parameters: Query parameters
            connection_name: Database connection to use

        Returns:
            List of records
        """
        with self.get_session(connection_name) as session:
            try:
                return list(session.run(query, parameters or {}))
            except Exception as e:
                self.logger.error(f"Query failed: {e}")
                raise DatabaseError(f"Query execution failed: {e}")

    def close_all(self) -> None:
        """Close every driver."""
        with self._lock:
            for connection_name, driver in self._drivers.items():
                driver.close()
                self.logger.info(f"Closed database connection: {connection_name}")
            self._drivers.clear()


@lru_cache()
def get_database() -> DatabaseManager:
    """
    Get the global database manager instance.

    Returns:
        DatabaseManager singleton instance
    """
    return DatabaseManager()


def close_database_connections():
    """Close all database connections on application shutdown."""
    get_database().close_all()
