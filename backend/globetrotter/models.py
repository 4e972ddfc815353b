from globetrotter import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import json
import uuid


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    auth_token = db.Column(db.String(128), unique=True, nullable=True, index=True)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Destination(db.Model):
    __tablename__ = 'destination'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    city = db.Column(db.String(128), nullable=False, index=True)
    country = db.Column(db.String(128), nullable=False)
    clues = db.relationship('Clue', backref='destination', lazy='dynamic')


class Clue(db.Model):
    __tablename__ = 'clue'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey('destination.id'), nullable=False, index=True)
    clue_text = db.Column(db.Text, nullable=False)


class FunFact(db.Model):
    __tablename__ = 'fun_fact'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey('destination.id'), nullable=False, index=True)
    fact_text = db.Column(db.Text, nullable=False)


class Trivia(db.Model):
    __tablename__ = 'trivia'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey('destination.id'), nullable=False, index=True)
    trivia_text = db.Column(db.Text, nullable=False)


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    destination_id = db.Column(db.String(36), db.ForeignKey('destination.id'), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)


class Challenge(db.Model):
    __tablename__ = 'challenge'
    __table_args__ = (
        db.CheckConstraint('score >= 0', name='ck_challenge_score_non_negative'),
    )
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    inviter = db.Column(db.String(64), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    correct_answers = db.Column(db.Integer, nullable=False, default=0)
    incorrect_answers = db.Column(db.Integer, nullable=False, default=0)
    clues_revealed = db.Column(db.Integer, nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    # Set once, by the single request allowed to build the question queue
    questions_generated = db.Column(db.Boolean, nullable=False, default=False)
    question_ids = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of question ids
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    ended_at = db.Column(db.DateTime(timezone=True), nullable=True)

    @property
    def queue(self):
        try:
            return list(json.loads(self.question_ids or '[]'))
        except ValueError:
            return []

    @queue.setter
    def queue(self, ids):
        self.question_ids = self.serialize_queue(ids)

    @staticmethod
    def serialize_queue(ids):
        # Order-preserving dedupe: an id appears in the queue at most once
        return json.dumps(list(dict.fromkeys(str(i) for i in ids or [])))
