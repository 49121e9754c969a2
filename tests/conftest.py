import mongomock
import pytest


BOOKS = [
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "genre": "Fiction",
     "published_year": 1960, "price": 12.99, "in_stock": True},
    {"title": "1984", "author": "George Orwell", "genre": "Dystopian",
     "published_year": 1949, "price": 10.99, "in_stock": True},
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "genre": "Fiction",
     "published_year": 1925, "price": 9.99, "in_stock": True},
    {"title": "Brave New World", "author": "Aldous Huxley", "genre": "Dystopian",
     "published_year": 1932, "price": 11.50, "in_stock": False},
    {"title": "Pride and Prejudice", "author": "Jane Austen", "genre": "Romance",
     "published_year": 1813, "price": 7.99, "in_stock": True},
    {"title": "The Alchemist", "author": "Paulo Coelho", "genre": "Fiction",
     "published_year": 1988, "price": 10.99, "in_stock": True},
    {"title": "Emma", "author": "Jane Austen", "genre": "Romance",
     "published_year": 1815, "price": 8.49, "in_stock": True},
    {"title": "The Midnight Library", "author": "Matt Haig", "genre": "Fiction",
     "published_year": 2020, "price": 14.99, "in_stock": True},
]


@pytest.fixture
def empty_collection():
    """A fresh, empty in-memory ``books`` collection."""
    return mongomock.MongoClient()["plp_bookstore"]["books"]


@pytest.fixture
def books(empty_collection):
    """The ``books`` collection seeded with a small bookstore."""
    empty_collection.insert_many([dict(b) for b in BOOKS])
    return empty_collection
