# itam/services/store.py
import logging
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError
from itam import db
from itam.errors import ConcurrentModification, StoreWriteFailure

logger = logging.getLogger(__name__)

def commit_changes(description):
    """Commit the entity change and its audit entry as one unit of work."""
    try:
        db.session.commit()
    except StaleDataError:
        db.session.rollback()
        logger.warning("Concurrent modification while trying to %s", description)
        raise ConcurrentModification()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to %s", description)
        raise StoreWriteFailure(f"Failed to {description}")
