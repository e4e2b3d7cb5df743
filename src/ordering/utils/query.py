"""Query helpers shared by the ordering repositories."""

PAGE_SIZE = 100


def fetch_all(query, page_size: int = PAGE_SIZE) -> list:
    """Drain a Protean queryset page by page.

    Querysets are capped at a default page size, so listing a whole ledger
    has to walk the offsets until a short page comes back.
    """
    results = []
    offset = 0
    while True:
        page = query.offset(offset).limit(page_size).all()
        results.extend(page.items)
        if len(page.items) < page_size:
            return results
        offset += page_size
