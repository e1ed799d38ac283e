import sys
import os

# Add project root to python path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text
from crediflow.core.database import engine
from crediflow.core.logger import logger

INDEXES = {
    # Admin tracking: verified payments grouped by loan
    "idx_payments_status_loan": "CREATE INDEX IF NOT EXISTS idx_payments_status_loan "
                                "ON payments (status, loan_application_id, amount_paid);",
    # Repayment page: payment history of one loan, newest first
    "idx_payments_loan_created": "CREATE INDEX IF NOT EXISTS idx_payments_loan_created "
                                 "ON payments (loan_application_id, created_at DESC);",
    # Review queues: applications by status, newest first
    "idx_applications_status_created": "CREATE INDEX IF NOT EXISTS idx_applications_status_created "
                                       "ON loan_applications (status, created_at DESC);",
    # Unread badge
    "idx_notifications_user_unread": "CREATE INDEX IF NOT EXISTS idx_notifications_user_unread "
                                     "ON notifications (user_id, is_read);",
}


def optimize_indexes():
    """
    Creates composite indexes for the repayment tracking and review queue queries.
    """
    logger.info("Starting database optimization...")

    with engine.connect() as conn:
        for name, statement in INDEXES.items():
            try:
                logger.info(f"Creating index: {name}")
                conn.execute(text(statement))
                logger.info(f"Index {name} created/verified.")
            except Exception as e:
                logger.warning(f"Could not create {name}: {e}")

        conn.commit()

    logger.info("Database optimization completed.")


if __name__ == "__main__":
    optimize_indexes()
