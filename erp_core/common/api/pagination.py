from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """Every list endpoint answers `{count, next, previous, results}`; clients may ask for up to 200 rows."""

    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 200
