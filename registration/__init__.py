"""User registration service: FastAPI + PostgreSQL + Redis + Kafka."""

__version__ = "0.1.0"
