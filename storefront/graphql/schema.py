import strawberry
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL
from strawberry.tools import merge_types

from storefront.config import GRAPHIQL_ENABLED
from storefront.graphql.common import get_context
from storefront.graphql.errors import ServiceErrorExtensions
from storefront.graphql.product import ProductMutation, ProductQuery, ProductSubscription
from storefront.graphql.user import UserMutation, UserQuery, UserSubscription

Query = merge_types("Query", (ProductQuery, UserQuery))
Mutation = merge_types("Mutation", (ProductMutation, UserMutation))
Subscription = merge_types("Subscription", (ProductSubscription, UserSubscription))

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
    extensions=[ServiceErrorExtensions],
)


def create_graphql_router(graphiql: bool = GRAPHIQL_ENABLED) -> GraphQLRouter:
    return GraphQLRouter(
        schema,
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
        subscription_protocols=[GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL],
    )
