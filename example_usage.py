"""
Example usage of search sync with SQLAlchemy and Elasticsearch.

Creates a small SQLite table, mirrors it into Elasticsearch and searches it.
Needs a reachable cluster at ELASTICSEARCH_URL.
"""

import logging
import os
from datetime import datetime
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import DateTime, Integer, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from search_sync import SyncOrchestrator

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///search_sync_example.db")
ES_HOST = os.getenv("ELASTICSEARCH_URL", "http://localhost:9200")


class Base(DeclarativeBase):
    pass


class Article(Base):
    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(255))
    body: Mapped[Optional[str]] = mapped_column(Text)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime)


def setup_orchestrator(session_factory):
    """Mirror the articles table into the "articles" alias."""
    return SyncOrchestrator.from_sqlalchemy(
        Article,
        session_factory,
        es_host=ES_HOST,
        client_options={"request_timeout": 10},
    )


def main():
    logging.basicConfig(level=logging.INFO)

    engine = create_engine(DATABASE_URL)
    Base.metadata.create_all(engine)
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    orchestrator = setup_orchestrator(session_factory)

    # "articles" is only ever an alias; mappings go on the versioned index
    new_index = orchestrator.timestamped_index_name()

    print("\n=== Mappings ===")
    print(orchestrator.create_or_update_mapping(index=new_index))

    print("\n=== Reindex ===")
    orchestrator.reindex(index=new_index, batch_size=500)
    print(f"Alias {orchestrator.index} -> {orchestrator.latest_index_name()}")

    print("\n=== Writes (mirrored through lifecycle events) ===")
    with session_factory() as session:
        session.add(Article(title="Hello search", body="First post", published_at=datetime.now()))
        session.commit()

    print("\n=== Search ===")
    result = orchestrator.search("hello", scroll="1m", size=10)
    print(f"Total: {result.total} (took {result.took}ms)")
    while result:
        for article in result:
            print(f"  {article.id}: {article.title}")
        result = orchestrator.scroll(result, "1m")


if __name__ == "__main__":
    main()
