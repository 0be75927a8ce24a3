from collections.abc import Mapping


def _field_value(item, field):
    if isinstance(item, Mapping):
        return item[field]
    return getattr(item, field)


def sort_by_field(items, field):
    """Sort ``items`` in place by a string field, ignoring case.

    The sort is stable: items with equal keys keep their relative order.
    Returns the same list so callers can chain it.
    """
    items.sort(key=lambda item: _field_value(item, field).upper())
    return items


def sort_books(books):
    return sort_by_field(books, "title")


def sort_authors(authors):
    return sort_by_field(authors, "family_name")


def sort_genres(genres):
    return sort_by_field(genres, "name")
