from decimal import Decimal
from typing import Dict, Any
from sqlalchemy.orm import Session
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import (
    ConcurrentModificationError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from app.domain.pricing import compute_totals
from app.repos.cart_repo import CartRepo
from app.repos.unit_of_work import UnitOfWork
from app.repos.variant_repo import VariantRepo
from app.utils.settings import FREE_SHIPPING_THRESHOLD
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs dla koszyka uzytkownika (jeden koszyk na usera)
    commands (add, update, remove, clear) modyfikuja stan
    query (get, summary) tylko odczyt, poza leniwym utworzeniem koszyka
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.variants = VariantRepo(db)

    #query - odczyt
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)
        return self._to_dict(cart)

    def get_summary(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)
        items = self.repo.get_cart_items(cart.id)
        totals = compute_totals((i.price, i.quantity) for i in items)

        return {
            "item_count": sum(i.quantity for i in items),
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "shipping_cost": totals.shipping_cost,
            "total": totals.total,
            "free_shipping_threshold": FREE_SHIPPING_THRESHOLD,
            "amount_for_free_shipping": totals.amount_for_free_shipping,
        }

    #commands
    def add_item(self, user_id: int, variant_id: int, quantity: int) -> Dict[str, Any]:
        self._check_quantity(quantity)
        cart = self._get_or_create(user_id)

        variant = self.variants.get(variant_id)
        if variant is None:
            raise NotFoundError("variant", variant_id)

        with UnitOfWork(self.db) as uow:
            existing_item = uow.carts.get_cart_item_by_variant(cart.id, variant_id)
            new_quantity = quantity + (existing_item.quantity if existing_item else 0)

            if new_quantity > variant.stock:
                raise InsufficientStockError(variant.id, variant.stock)

            if existing_item:
                logger.info(
                    f"Variant {variant_id} already in cart {cart.id}, quantity "
                    f"{existing_item.quantity} -> {new_quantity}"
                )
                existing_item.quantity = new_quantity
                existing_item.price = variant.price  # odswiez cene
            else:
                logger.info(f"Adding variant {variant_id} x {quantity} to cart {cart.id}")
                uow.carts.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        variant_id=variant_id,
                        quantity=quantity,
                        price=variant.price,
                    )
                )

            self._bump_version(uow, cart)

        return self._to_dict(cart)

    def update_item(self, user_id: int, item_id: int, quantity: int) -> Dict[str, Any]:
        self._check_quantity(quantity)
        cart = self._get_or_create(user_id)

        with UnitOfWork(self.db) as uow:
            item = uow.carts.get_cart_item(cart.id, item_id)
            if item is None:
                raise NotFoundError("cart item", item_id)

            variant = self.variants.get(item.variant_id)
            if variant is None:
                raise NotFoundError("variant", item.variant_id)
            if quantity > variant.stock:
                raise InsufficientStockError(variant.id, variant.stock)

            logger.info(f"Cart {cart.id}: item {item_id} quantity {item.quantity} -> {quantity}")
            item.quantity = quantity
            self._bump_version(uow, cart)

        return self._to_dict(cart)

    def remove_item(self, user_id: int, item_id: int) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)

        with UnitOfWork(self.db) as uow:
            item = uow.carts.get_cart_item(cart.id, item_id)
            if item is None:
                raise NotFoundError("cart item", item_id)

            logger.info(f"Removing item {item_id} from cart {cart.id}")
            uow.carts.delete_cart_item(item)
            self._bump_version(uow, cart)

        return self._to_dict(cart)

    def clear_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self._get_or_create(user_id)

        with UnitOfWork(self.db) as uow:
            removed = uow.carts.clear_items(cart.id)
            self._bump_version(uow, cart)

        logger.info(f"Cart {cart.id} cleared ({removed} lines)")
        return self._to_dict(cart)

    # helpers

    def _get_or_create(self, user_id: int) -> CartModel:
        cart = self.repo.get_cart_by_user(user_id)
        if cart:
            return cart

        with UnitOfWork(self.db) as uow:
            cart = uow.carts.create_cart(CartModel(user_id=user_id, version=1))

        logger.info(f"Created cart {cart.id} for user {user_id}")
        return cart

    @staticmethod
    def _bump_version(uow: UnitOfWork, cart: CartModel) -> None:
        # Optimistic locking, np update set version 2 where id 1 and version 1
        rowcount = uow.carts.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={"version": cart.version + 1},
        )
        if rowcount == 0:
            raise ConcurrentModificationError(
                f"Cart {cart.id} was modified by another request", cart_id=cart.id
            )

    @staticmethod
    def _check_quantity(quantity: int) -> None:
        if quantity <= 0:
            raise ValidationError("Quantity must be greater than 0", quantity=quantity)

    def _to_dict(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)
        lines = []
        for i in items:
            variant = self.variants.get(i.variant_id)
            lines.append(
                {
                    "id": i.id,
                    "variant_id": i.variant_id,
                    "product_name": variant.product_name if variant else "",
                    "quantity": i.quantity,
                    "unit_price": i.price,
                    "line_total": i.price * i.quantity,
                }
            )

        #dict przeksztalcany w jsona
        return {
            "cart_id": cart.id,
            "user_id": cart.user_id,
            "version": cart.version,
            "items": lines,
            "total": sum((line["line_total"] for line in lines), Decimal("0.00")),
        }
