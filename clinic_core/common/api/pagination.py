# clinic_core/common/api/pagination.py
from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """
    {count, next, previous, results}; ?page=N&page_size=M (M <= 200).
    """
    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 200
