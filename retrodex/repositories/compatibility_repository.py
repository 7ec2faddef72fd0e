"""
Repository for compatibility join rows

All join tables share one shape, so a single repository serves every
relation in COMPATIBILITY_RELATIONS. Each method takes the relation as its
first argument.
"""

from sqlalchemy.exc import SQLAlchemyError

from retrodex.db import db
from retrodex.models.compatibility import relations_for_entity


class CompatibilityRepository:
    """Repository for compatibility join rows"""

    @staticmethod
    def get_by_id(relation, id):
        return db.session.get(relation.model, id)

    @staticmethod
    def get_pair(relation, left_id, right_id):
        """Existing join row for a (left, right) pair, if any"""
        model = relation.model
        return model.query.filter(
            getattr(model, relation.left.key) == left_id,
            getattr(model, relation.right.key) == right_id,
        ).first()

    @staticmethod
    def list_for(relation, side, entity_id):
        """Join rows where the given side references entity_id, oldest first"""
        model = relation.model
        key = getattr(relation, side).key
        return model.query.filter(getattr(model, key) == entity_id).order_by(model.created_at, model.id).all()

    @staticmethod
    def create(relation, left_id, right_id, commit=True, **kwargs):
        """Create new join row"""
        try:
            values = {relation.left.key: left_id, relation.right.key: right_id}
            values.update({k: v for k, v in kwargs.items() if hasattr(relation.model, k)})
            item = relation.model(**values)
            db.session.add(item)
            if commit:
                db.session.commit()
                db.session.refresh(item)
            else:
                db.session.flush()
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete(relation, id):
        """Delete join row"""
        item = db.session.get(relation.model, id)
        if not item:
            return False

        try:
            db.session.delete(item)
            db.session.commit()
            return True
        except SQLAlchemyError as e:
            db.session.rollback()
            raise e

    @staticmethod
    def delete_for_entity(entity_type, entity_id):
        """Remove join rows on every relation touching an entity, without committing"""
        removed = 0
        for relation, side in relations_for_entity(entity_type):
            model = relation.model
            key = getattr(relation, side).key
            removed += model.query.filter(getattr(model, key) == entity_id).delete(synchronize_session=False)
        return removed

    @staticmethod
    def count(relation):
        return relation.model.query.count()
