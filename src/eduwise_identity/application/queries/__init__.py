from eduwise_identity.application.queries.get_user_query import GetUserQuery
from eduwise_identity.application.queries.list_users_query import ListUsersQuery

__all__ = [
    "GetUserQuery",
    "ListUsersQuery",
]
