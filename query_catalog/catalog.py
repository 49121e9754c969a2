"""
The bookstore query catalog, in run order.

Documents in the ``books`` collection look like::

    {title, author, genre, published_year, price, in_stock, pages, publisher}
"""

from typing import Tuple

from descriptors import ASCENDING, DESCENDING, QueryDescriptor, QueryKind
from response_formatter import (
    compact_document_lines,
    delete_summary,
    document_lines,
    explain_summary,
    group_lines,
    index_summary,
    update_summary,
)

PAGE_SIZE = 5

BOOKSTORE_CATALOG: Tuple[QueryDescriptor, ...] = (
    # ---- basic reads ----
    QueryDescriptor(
        name='Books in genre "Fiction"',
        kind=QueryKind.FIND,
        params={"filter": {"genre": "Fiction"}},
        formatter=document_lines("{title} - {author} ({published_year})"),
    ),
    QueryDescriptor(
        name="Books published after 1925",
        kind=QueryKind.FIND,
        params={"filter": {"published_year": {"$gt": 1925}}},
        formatter=document_lines("{title} - {published_year}"),
    ),
    QueryDescriptor(
        name="Books by Jane Austen",
        kind=QueryKind.FIND,
        params={"filter": {"author": "Jane Austen"}},
        formatter=document_lines("{title} - {published_year}"),
    ),

    # ---- writes ----
    QueryDescriptor(
        name='Update price of "1984" to 12.0',
        kind=QueryKind.UPDATE_ONE,
        params={"filter": {"title": "1984"}, "update": {"$set": {"price": 12.0}}},
        formatter=update_summary,
    ),
    QueryDescriptor(
        name='Delete book titled "The Alchemist"',
        kind=QueryKind.DELETE_ONE,
        params={"filter": {"title": "The Alchemist"}},
        formatter=delete_summary,
    ),

    # ---- projection, sorting, pagination ----
    QueryDescriptor(
        name="In-stock books published after 2010",
        kind=QueryKind.FIND,
        params={"filter": {"in_stock": True, "published_year": {"$gt": 2010}}},
        formatter=document_lines("{title} - {published_year}"),
    ),
    QueryDescriptor(
        name="Projection (title, author, price)",
        kind=QueryKind.FIND,
        params={
            "projection": {"title": 1, "author": 1, "price": 1, "_id": 0},
            "limit": 10,
        },
        formatter=compact_document_lines(),
    ),
    QueryDescriptor(
        name="Top 10 cheapest books (price asc)",
        kind=QueryKind.FIND,
        params={"sort": [("price", ASCENDING)], "limit": 10},
        formatter=document_lines("{title} - {price}"),
    ),
    QueryDescriptor(
        name="Top 10 most expensive books (price desc)",
        kind=QueryKind.FIND,
        params={"sort": [("price", DESCENDING)], "limit": 10},
        formatter=document_lines("{title} - {price}"),
    ),
    QueryDescriptor(
        name=f"Pagination example - page 1 (first {PAGE_SIZE})",
        kind=QueryKind.FIND,
        params={"skip": 0, "limit": PAGE_SIZE},
        formatter=document_lines("{title}"),
    ),
    QueryDescriptor(
        name=f"Pagination example - page 2 (next {PAGE_SIZE})",
        kind=QueryKind.FIND,
        params={"skip": PAGE_SIZE, "limit": PAGE_SIZE},
        formatter=document_lines("{title}"),
    ),

    # ---- aggregations ----
    QueryDescriptor(
        name="Average price by genre",
        kind=QueryKind.AGGREGATE,
        params={"pipeline": [
            {"$group": {
                "_id": "$genre",
                "avgPrice": {"$avg": "$price"},
                "count": {"$sum": 1},
            }},
            {"$sort": {"avgPrice": -1}},
        ]},
        formatter=group_lines("{_id}: avg={avgPrice:.2f} ({count} books)"),
    ),
    QueryDescriptor(
        name="Author with the most books",
        kind=QueryKind.AGGREGATE,
        params={"pipeline": [
            {"$group": {"_id": "$author", "count": {"$sum": 1}}},
            {"$sort": {"count": -1}},
            {"$limit": 1},
        ]},
        formatter=group_lines("{_id} ({count} books)"),
    ),
    QueryDescriptor(
        name="Books grouped by decade",
        kind=QueryKind.AGGREGATE,
        params={"pipeline": [
            {"$project": {
                "title": 1,
                "published_year": 1,
                "decade": {"$multiply": [
                    {"$floor": {"$divide": ["$published_year", 10]}}, 10,
                ]},
            }},
            {"$group": {"_id": "$decade", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]},
        formatter=group_lines("{_id}s: {count}"),
    ),

    # ---- indexes and diagnostics ----
    QueryDescriptor(
        name="Create index on title",
        kind=QueryKind.CREATE_INDEX,
        params={"keys": [("title", ASCENDING)]},
        formatter=index_summary,
    ),
    QueryDescriptor(
        name="Create index on author (asc) and published_year (desc)",
        kind=QueryKind.CREATE_INDEX,
        params={"keys": [("author", ASCENDING), ("published_year", DESCENDING)]},
        formatter=index_summary,
    ),
    QueryDescriptor(
        name='Explain for query { title: "1984" }',
        kind=QueryKind.EXPLAIN,
        params={"filter": {"title": "1984"}},
        formatter=explain_summary,
    ),
)
