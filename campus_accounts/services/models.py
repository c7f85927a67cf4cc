"""Database models."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, \
    String, Text, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class DBVerification(Base):  # type: ignore
    """
    Email verification codes.

    +-----------+--------------+------+-----+---------+----------------+
    | Field     | Type         | Null | Key | Default | Extra          |
    +-----------+--------------+------+-----+---------+----------------+
    | auth_id   | int(11)      | NO   | PRI | NULL    | auto_increment |
    | email     | varchar(255) | NO   | MUL |         |                |
    | auth_code | varchar(8)   | NO   |     |         |                |
    | date      | datetime     | NO   |     | NULL    |                |
    | is_auth   | tinyint(1)   | NO   |     | 0       |                |
    +-----------+--------------+------+-----+---------+----------------+
    """

    __tablename__ = 'auth'

    auth_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, index=True)
    auth_code = Column(
        String(8).with_variant(String(8, collation='utf8mb4_bin'), 'mysql'),
        nullable=False
    )
    """Case-sensitive; binary collation on MySQL."""
    date = Column(DateTime, nullable=False)
    is_auth = Column(Boolean, nullable=False, server_default=text("'0'"))


class DBUser(Base):  # type: ignore
    """
    User accounts. ``id`` is the verified email address.

    ``uni_id``, ``name`` and ``birthday`` are only set for student accounts.
    """

    __tablename__ = 'user'

    id = Column(String(255), primary_key=True)
    nickname = Column(String(20), nullable=False, unique=True, index=True)
    password = Column(String(64), nullable=False)
    is_admin = Column(Boolean, nullable=False, server_default=text("'0'"))
    is_student = Column(Boolean, nullable=False, server_default=text("'0'"))
    uni_id = Column(String(32), index=True)
    name = Column(String(50))
    birthday = Column(String(8))


class DBStudent(Base):  # type: ignore
    """Student registry that student accounts are checked against."""

    __tablename__ = 'student'

    uni_id = Column(String(32), primary_key=True)
    name = Column(String(50), primary_key=True)
    birthday = Column(String(8), primary_key=True)


class DBProfile(Base):  # type: ignore
    """
    User profiles, one per user.

    List fields hold JSON arrays; ``NULL`` means the field is not set.
    """

    __tablename__ = 'user_profile'

    user_id = Column(ForeignKey('user.id'), primary_key=True)
    is_open_information = Column(Boolean, nullable=False,
                                 server_default=text("'0'"))
    image = Column(String(255))
    """Object storage key."""
    positions = Column(Text)
    technologies = Column(Text)
    introduction = Column(Text)
    awards = Column(Text)
    links = Column(Text)

    user = relationship('DBUser')


class DBJobCategory(Base):  # type: ignore
    """Lookup table for profile positions."""

    __tablename__ = 'job_category'

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False)


class DBTechnology(Base):  # type: ignore
    """Lookup table for profile technologies."""

    __tablename__ = 'technology'

    id = Column(Integer, primary_key=True)
    name = Column(String(64), nullable=False)
