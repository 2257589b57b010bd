"""
Database connection management.

A single MongoConnectionManager is built at process start and handed to every
caller that needs the database. The client is created lazily, once, under a
lock; the connection string is validated before any network attempt.
"""
import logging
import threading
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from app_config import get_connection_string, CONNECTION_POOL_SIZE, CONNECTION_TIMEOUT_MS
from connection_validator import (
    ConnectionValidationError, validate, classify_error, diagnose_auth_failure
)

logger = logging.getLogger(__name__)


class MongoConnectionManager:
    """
    Owns the process-wide MongoDB client.

    Attributes:
        report (ValidationReport): Validation result for the connection string.
        pool_size (int): maxPoolSize handed to the driver.
        timeout_ms (int): Server selection and connect timeout in milliseconds.
    """

    def __init__(self, connection_string, pool_size=CONNECTION_POOL_SIZE,
                 timeout_ms=CONNECTION_TIMEOUT_MS, client_factory=MongoClient):
        """
        Args:
            connection_string (str): MongoDB connection string.
            pool_size (int, optional): Connection pool size. Defaults to WL_POOL_SIZE.
            timeout_ms (int, optional): Driver timeouts. Defaults to WL_TIMEOUT_MS.
            client_factory (callable, optional): Builds the client. Defaults to MongoClient.
        """
        self._connection_string = connection_string
        self.report = validate(connection_string)
        self.pool_size = pool_size
        self.timeout_ms = timeout_ms
        self._client_factory = client_factory
        self._client = None
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls):
        """Build the manager from the MONGODB_URI environment setting."""
        connection_string = get_connection_string()
        if not connection_string:
            raise ConnectionValidationError("MONGODB_URI must be set within the .env file or environment")
        return cls(connection_string)

    @property
    def sanitized_uri(self):
        return self.report.sanitized_uri

    @property
    def is_connected(self):
        return self._client is not None

    def get_client(self):
        """
        Get the cached MongoDB client, connecting on first use.

        Returns:
            MongoClient: Cached client instance.

        Raises:
            ConnectionValidationError: If the connection string is structurally invalid.
            PyMongoError: If the connection attempt fails.
        """
        client = self._client
        if client is not None:
            logger.debug("Using cached MongoDB connection")
            return client

        with self._lock:
            if self._client is None:
                self._client = self._connect()
            return self._client

    def _connect(self):
        if not self.report.is_valid:
            for issue in self.report.issues:
                logger.error(f"MongoDB URI validation issue: {issue}")
            raise ConnectionValidationError(
                f"Invalid MongoDB URI format: {', '.join(self.report.issues)}",
                self.report.issues
            )

        client = None
        try:
            # mongodb+srv:// hosts are resolved here, so this can fail too
            client = self._client_factory(
                self._connection_string,
                maxPoolSize=self.pool_size,
                minPoolSize=1,
                maxIdleTimeMS=30000,  # 30 seconds
                serverSelectionTimeoutMS=self.timeout_ms,
                connectTimeoutMS=self.timeout_ms,
                retryWrites=True,
                retryReads=True
            )
            client.admin.command('ping')
        except PyMongoError as e:
            self._log_failure(e)
            if client is not None:
                client.close()
            raise

        connection = self.report.connection
        logger.info(f"Connected to MongoDB with pool size {self.pool_size}")
        logger.info(f"URI: {self.sanitized_uri}")
        logger.info(f"Database: {connection.database_name}")
        return client

    def _log_failure(self, error):
        kind = classify_error(error)
        logger.error(f"MongoDB connection failed ({kind}) for {self.sanitized_uri}: {error}")
        for suggestion in diagnose_auth_failure(self.report, kind):
            logger.error(f"  - {suggestion}")

    def get_database(self, database_name=None):
        """
        Get a database instance using the cached client.

        Args:
            database_name (str, optional): Name of the database. Defaults to the URI's database.

        Returns:
            Database: MongoDB database instance
        """
        client = self.get_client()
        return client[database_name or self.report.connection.database_name]

    def ping(self):
        """Return True when the server answers a ping."""
        result = self.get_client().admin.command('ping')
        return result.get('ok', 0) == 1

    def connection_info(self):
        """Summary of the target that is safe to log or display."""
        connection = self.report.connection
        return {
            'uri': self.sanitized_uri,
            'hosts': connection.hosts if connection else [],
            'database': connection.database_name if connection else None,
            'connected': self.is_connected
        }

    def close(self):
        """
        Close and forget the cached client. The next get_client() reconnects.
        """
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            client.close()
            logger.info("MongoDB connection closed")
