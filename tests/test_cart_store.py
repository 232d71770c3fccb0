"""
Cart Store tests: row storage and the one-row-per-(user, product) constraint.
"""
import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from modules.cart.models import CartItem
from modules.cart.service import cart_store


class TestUpsert:

    def test_insert_then_update_same_row(self, db, make_product):
        product = make_product()

        created = cart_store.upsert_item(db, "u1", product.id, 2)
        updated = cart_store.upsert_item(db, "u1", product.id, 5, existing=created)
        db.commit()

        assert updated.id == created.id
        assert cart_store.get_item(db, "u1", product.id).quantity == 5
        assert db.query(CartItem).count() == 1

    def test_second_insert_for_same_pair_is_rejected(self, db, make_product):
        product = make_product()
        cart_store.upsert_item(db, "u1", product.id, 1)

        with pytest.raises(IntegrityError):
            cart_store.upsert_item(db, "u1", product.id, 1)
        db.rollback()

    def test_stale_version_is_rejected(self, db, unlocked_session_factory, make_product):
        product = make_product()
        cart_store.upsert_item(db, "u1", product.id, 1)
        db.commit()

        reader = unlocked_session_factory()
        try:
            item = cart_store.get_item(reader, "u1", product.id)

            cart_store.get_item(db, "u1", product.id).quantity = 4
            db.commit()

            with pytest.raises(StaleDataError):
                cart_store.upsert_item(reader, "u1", product.id, 2, existing=item)
            reader.rollback()
        finally:
            reader.close()

    def test_non_positive_quantity_violates_check(self, db, make_product):
        product = make_product()
        with pytest.raises(IntegrityError):
            cart_store.upsert_item(db, "u1", product.id, 0)
        db.rollback()


class TestQueries:

    def test_list_items_is_per_user_and_ordered(self, db, make_product):
        a, b = make_product(), make_product()
        cart_store.upsert_item(db, "u1", b.id, 1)
        cart_store.upsert_item(db, "u1", a.id, 2)
        cart_store.upsert_item(db, "u2", a.id, 3)
        db.commit()

        items = cart_store.list_items(db, "u1")

        assert [it.product_id for it in items] == [b.id, a.id]
        assert items[0].product.name == b.name

    def test_get_item_by_id_and_delete(self, db, make_product):
        product = make_product()
        item = cart_store.upsert_item(db, "u1", product.id, 1)
        db.commit()

        found = cart_store.get_item_by_id(db, item.id)
        cart_store.delete_item(db, found)
        db.commit()

        assert cart_store.get_item_by_id(db, item.id) is None
        assert cart_store.list_items(db, "u1") == []
