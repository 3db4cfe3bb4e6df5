import logging
from sqlmodel import Session, select
from core.config import ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME
from core.database import engine, create_db_and_tables
from models.user import User, UserRole
from utils.security import hash_password

logger = logging.getLogger(__name__)


def seed_admin(bind=engine) -> User:
    with Session(bind) as session:
        # check if admin already exists
        statement = select(User).where(User.email == ADMIN_EMAIL.lower())
        existing_admin = session.exec(statement).first()

        if existing_admin:
            logger.info("Admin %s already exists", existing_admin.email)
            return existing_admin

        admin = User(
            name=ADMIN_NAME,
            email=ADMIN_EMAIL.lower(),
            password_hash=hash_password(ADMIN_PASSWORD),
            role=UserRole.admin,
        )

        session.add(admin)
        session.commit()
        session.refresh(admin)
        logger.info("Admin %s seeded", admin.email)
        return admin

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_db_and_tables()
    seed_admin()
