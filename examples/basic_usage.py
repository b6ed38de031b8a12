"""
Basic usage example for idcollection.
"""

from idcollection import Collection, FilterBuilder, Record
from idcollection.storage import load_collection, serialize_collection


def main():
    print("=" * 60)
    print("idcollection Basic Usage Example")
    print("=" * 60)

    # 1. Create collection
    print("\n1. Creating collection...")
    books = Collection([
        Record("dune", {"title": "Dune", "genre": "SciFi", "year": 1965,
                        "author": {"name": "Frank Herbert"}}),
        Record("emma", {"title": "Emma", "genre": "Classic", "year": 1815,
                        "author": {"name": "Jane Austen"}}),
        Record("neuromancer", {"title": "Neuromancer", "genre": "scifi", "year": 1984,
                               "author": {"name": "William Gibson"}}),
    ])
    print(f"   Created: {books}")

    # 2. Mutate
    print("\n2. Adding and removing members...")
    books.add(Record("hyperion", {"title": "Hyperion", "genre": "SciFi", "year": 1989,
                                  "author": {"name": "Dan Simmons"}}))
    books.prepend(Record("persuasion", {"title": "Persuasion", "genre": "Classic", "year": 1817,
                                        "author": {"name": "Jane Austen"}}))
    books.append("an anonymous note")
    print(f"   Keys: {books.keys()}")
    books.remove("0")
    print(f"   Has 'dune': {books.has('dune')}, position {books.index_of('dune')}")

    # 3. Group
    print("\n3. Grouping by genre...")
    for genre, group in books.group_by("genre").items():
        print(f"   {genre}: {group.keys()}")

    # 4. Query
    print("\n4. Querying...")
    modern = FilterBuilder().field("year").gte(1900).build()
    result = books.query({
        "filter": modern,
        "sort": "year desc",
        "not": "hyperion",
    })
    print(f"   Modern books, newest first: {result.keys()}")

    # 5. Search
    print("\n5. Searching...")
    result = books.search("austen", {"fields": ["title", "author.name"]})
    for key, score in result.search_scores.items():
        print(f"   {key}: {score}")

    # 6. Paginate
    print("\n6. Paginating...")
    page = books.query({"sort": "title", "paginate": {"limit": 2, "page": 2}})
    print(f"   Page {page.pagination.page}/{page.pagination.last_page}: {page.keys()}")

    # 7. Serialize
    print("\n7. Serializing...")
    data = serialize_collection(books)
    restored = load_collection(data, Record.from_dict)
    print(f"   {len(data)} bytes, round trip equal: {restored == books}")

    print("\n" + "=" * 60)
    print("Example completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
