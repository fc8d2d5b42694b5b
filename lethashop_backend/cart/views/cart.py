# cart/views/cart.py

"""
CART API VIEWS

Routes (mounted at /api/cart/):
- GET    /                  current cart
- POST   /  (or /add/)      add / upsert a line
- DELETE /                  clear the cart
- PUT|PATCH /<product_id>/  set quantity
- DELETE    /<product_id>/  remove a line

Every response returns the whole cart so the SPA can re-render in one go.
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from backend.responses import error_response
from cart.serializers import AddCartItemSerializer, CartSerializer, UpdateCartItemSerializer
from cart.services import (
    ProductUnavailableError,
    add_item,
    clear_cart,
    remove_item,
    set_quantity,
    summarize_cart,
)


def _cart_response(user, http_status=status.HTTP_200_OK):
    return Response(CartSerializer(summarize_cart(user)).data, status=http_status)


def _item_not_in_cart():
    return error_response(
        code="NOT_IN_CART",
        message="Item not found in cart",
        http_status=status.HTTP_404_NOT_FOUND,
    )


class CartView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(tags=["Cart"], responses={200: CartSerializer})
    def get(self, request):
        return _cart_response(request.user)

    @extend_schema(
        tags=["Cart"],
        request=AddCartItemSerializer,
        responses={
            200: CartSerializer,
            404: OpenApiResponse(description="Product not found or unpublished"),
        },
        description="Add a product; an existing line has its quantity incremented.",
    )
    def post(self, request):
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            add_item(
                user=request.user,
                product_id=data["product_id"],
                quantity=data["quantity"],
                size=data.get("size"),
                color=data.get("color"),
            )
        except ProductUnavailableError as exc:
            return error_response(
                code="PRODUCT_NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        return _cart_response(request.user)

    @extend_schema(tags=["Cart"], responses={200: CartSerializer})
    def delete(self, request):
        clear_cart(request.user)
        return _cart_response(request.user)


class CartItemView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = CartSerializer

    @extend_schema(
        tags=["Cart"],
        request=UpdateCartItemSerializer,
        responses={200: CartSerializer, 404: OpenApiResponse(description="Not in cart")},
    )
    def put(self, request, product_id):
        serializer = UpdateCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = set_quantity(
            user=request.user,
            product_id=product_id,
            quantity=serializer.validated_data["quantity"],
        )
        if item is None:
            return _item_not_in_cart()
        return _cart_response(request.user)

    @extend_schema(
        tags=["Cart"],
        request=UpdateCartItemSerializer,
        responses={200: CartSerializer, 404: OpenApiResponse(description="Not in cart")},
    )
    def patch(self, request, product_id):
        return self.put(request, product_id)

    @extend_schema(
        tags=["Cart"],
        responses={200: CartSerializer, 404: OpenApiResponse(description="Not in cart")},
    )
    def delete(self, request, product_id):
        if not remove_item(user=request.user, product_id=product_id):
            return _item_not_in_cart()
        return _cart_response(request.user)
