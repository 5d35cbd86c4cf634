#!/usr/bin/env python3
"""
Database Seed Script

Populates the database with sample authors (and optionally books) and
prints a bearer token for calling the API.

There is no authors endpoint, so this script is the way to get authors
into a development database.

USAGE:
    # Make sure you're in the project root with venv activated
    python scripts/seed_data.py
    python scripts/seed_data.py --books --subject alice
    python scripts/seed_data.py --keep      # don't clear existing rows

This script:
1. Connects to the database using app settings
2. Creates tables if they don't exist
3. Clears existing data (unless --keep)
4. Creates sample authors, and books with --books
5. Prints an access token
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy import delete
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import Database
from app.models import Author, Book
from app.services.security import create_access_token

AUTHORS = [
    "Frank Herbert",
    "Ursula K. Le Guin",
    "Isaac Asimov",
    "Octavia E. Butler",
]

BOOKS = [
    ("Dune", "Desert planet saga", "Frank Herbert"),
    ("Dune Messiah", "Sequel", "Frank Herbert"),
    ("The Left Hand of Darkness", "An envoy on the winter planet Gethen.", "Ursula K. Le Guin"),
    ("Foundation", "The fall of a galactic empire, foreseen.", "Isaac Asimov"),
    ("Kindred", "A writer is pulled back in time to antebellum Maryland.", "Octavia E. Butler"),
]


def clear_data(db: Session) -> None:
    """Clear all existing data from the database."""
    print("Clearing existing data...")
    db.execute(delete(Book))
    db.execute(delete(Author))
    db.commit()
    print("Data cleared.")


def create_authors(db: Session) -> dict[str, Author]:
    """Create sample authors."""
    print("Creating authors...")
    authors = {name: Author(name=name) for name in AUTHORS}
    db.add_all(authors.values())
    db.commit()
    for author in authors.values():
        db.refresh(author)
    print(f"Created {len(authors)} authors.")
    return authors


def create_books(db: Session, authors: dict[str, Author]) -> list[Book]:
    """Create sample books for the seeded authors."""
    print("Creating books...")
    books = [
        Book(title=title, description=description, author_id=authors[author].id)
        for title, description, author in BOOKS
    ]
    db.add_all(books)
    db.commit()
    print(f"Created {len(books)} books.")
    return books


def seed_database(clear_existing: bool = True, with_books: bool = False, subject: str = "admin") -> None:
    """
    Main function to seed the database.

    Args:
        clear_existing: If True, clears existing data before seeding.
        with_books: If True, also creates sample books.
        subject: The "sub" claim of the printed token.
    """
    settings = get_settings()
    database = Database.from_settings(settings)

    print("=" * 60)
    print("Starting database seed...")
    print("=" * 60)

    database.create_tables()
    db = database.session()

    try:
        if clear_existing:
            clear_data(db)

        authors = create_authors(db)
        books = create_books(db, authors) if with_books else []

        print("=" * 60)
        print("Database seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Authors: {len(authors)}")
        for author in authors.values():
            print(f"      {author.id}: {author.name}")
        print(f"  - Books: {len(books)}")

        token = create_access_token({"sub": subject}, settings=settings)
        print(f"\nAccess token for '{subject}' "
              f"(valid {settings.access_token_expire_minutes} minutes):")
        print(f"  {token}")
        print(f"\nTry: curl -H 'Authorization: Bearer {token}' "
              f"http://localhost:{settings.port}{settings.api_prefix}/books/")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()
        database.close()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the Books API database.")
    parser.add_argument(
        "--keep",
        action="store_true",
        help="keep existing rows instead of clearing them first",
    )
    parser.add_argument(
        "--books",
        action="store_true",
        help="also create sample books",
    )
    parser.add_argument(
        "--subject",
        default="admin",
        help="subject (sub claim) of the printed access token",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    seed_database(
        clear_existing=not args.keep,
        with_books=args.books,
        subject=args.subject,
    )
