from contextlib import contextmanager
from sqlalchemy.orm.exc import StaleDataError
from constitution.extensions import db
from constitution.domain.invariants.exceptions import ConcurrencyConflict
from .change_feed import change_feed

@contextmanager
def transactional():
    """
    Context manager for database transactions.

    Subscribers of the change feed are notified only after a successful commit.
    """
    try:
        yield
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        change_feed.discard(db.session)
        raise ConcurrencyConflict(
            "Section was modified by another editor. Reload and try again."
        ) from exc
    except Exception:
        db.session.rollback()
        change_feed.discard(db.session)
        raise

    change_feed.dispatch(db.session)
