import datetime

import pytest
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

from saja import SajaAPI

JSONAPI = "application/vnd.api+json"

db = SQLAlchemy()


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, nullable=False)
    email = db.Column(db.String, nullable=False)
    age = db.Column(db.Integer)
    posts = db.relationship("Post", back_populates="user")
    profile = db.relationship("Profile", back_populates="user", uselist=False)


class Post(db.Model):
    __tablename__ = "posts"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, nullable=False)
    content = db.Column(db.Text)
    publishedAt = db.Column(db.DateTime)
    userId = db.Column(db.Integer, db.ForeignKey("users.id"))
    user = db.relationship("User", back_populates="posts")
    comments = db.relationship("Comment", back_populates="post")


class Comment(db.Model):
    __tablename__ = "comments"
    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    postId = db.Column(db.Integer, db.ForeignKey("posts.id"))
    post = db.relationship("Post", back_populates="comments")


class Profile(db.Model):
    __tablename__ = "profiles"
    id = db.Column(db.Integer, primary_key=True)
    bio = db.Column(db.Text)
    website = db.Column(db.String)
    userId = db.Column(db.Integer, db.ForeignKey("users.id"))
    user = db.relationship("User", back_populates="profile")


class Tag(db.Model):
    __tablename__ = "tags"
    id = db.Column(db.Integer, primary_key=True)
    label = db.Column(db.String, nullable=False)


def seed_test_data() -> None:
    user1 = User(name="John Doe", email="john@example.com", age=30)
    user2 = User(name="Jane Smith", email="jane@example.com", age=25)
    db.session.add_all([user1, user2])
    db.session.flush()

    post1 = Post(title="First Post", content="This is the first post", userId=user1.id, publishedAt=datetime.datetime(2024, 1, 1))
    post2 = Post(title="Second Post", content="This is the second post", userId=user1.id, publishedAt=datetime.datetime(2024, 6, 1))
    post3 = Post(title="Third Post", content="This is the third post", userId=user2.id)
    db.session.add_all([post1, post2, post3])
    db.session.flush()

    db.session.add_all(
        [
            Comment(text="Great post!", postId=post1.id),
            Comment(text="Thanks for sharing", postId=post1.id),
            Profile(bio="Software developer", website="https://johndoe.com", userId=user1.id),
            Tag(label="python"),
        ]
    )
    db.session.commit()


@pytest.fixture
def app() -> Flask:
    app = Flask("saja_tests")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    db.init_app(app)
    with app.app_context():
        db.create_all()
        seed_test_data()
        api = SajaAPI(app, prefix="/api", app_db=db)
        api.expose(User, Post, Comment, Profile, Tag)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask):
    return app.test_client()


@pytest.fixture
def jsonapi_headers() -> dict:
    return {"Content-Type": JSONAPI}
