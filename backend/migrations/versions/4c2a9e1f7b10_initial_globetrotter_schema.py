"""initial globetrotter schema: users, catalog, questions, challenges

Revision ID: 4c2a9e1f7b10
Revises:
Create Date: 2026-10-19 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e1f7b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'user',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=64), nullable=False),
        sa.Column('password_hash', sa.String(length=256), nullable=False),
        sa.Column('auth_token', sa.String(length=128), nullable=True),
    )
    op.create_index('ix_user_username', 'user', ['username'], unique=True)
    op.create_index('ix_user_auth_token', 'user', ['auth_token'], unique=True)

    op.create_table(
        'destination',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('city', sa.String(length=128), nullable=False),
        sa.Column('country', sa.String(length=128), nullable=False),
    )
    op.create_index('ix_destination_city', 'destination', ['city'])

    for table, column in (('clue', 'clue_text'), ('fun_fact', 'fact_text'), ('trivia', 'trivia_text')):
        op.create_table(
            table,
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('destination_id', sa.String(length=36), sa.ForeignKey('destination.id'), nullable=False),
            sa.Column(column, sa.Text(), nullable=False),
        )
        op.create_index(f'ix_{table}_destination_id', table, ['destination_id'])

    op.create_table(
        'question',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('destination_id', sa.String(length=36), sa.ForeignKey('destination.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )

    op.create_table(
        'challenge',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('inviter', sa.String(length=64), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('correct_answers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('incorrect_answers', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('clues_revealed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('questions_generated', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('question_ids', sa.Text(), nullable=False, server_default='[]'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('score >= 0', name='ck_challenge_score_non_negative'),
    )
    op.create_index('ix_challenge_inviter', 'challenge', ['inviter'])


def downgrade():
    op.drop_index('ix_challenge_inviter', table_name='challenge')
    op.drop_table('challenge')
    op.drop_table('question')
    for table in ('trivia', 'fun_fact', 'clue'):
        op.drop_index(f'ix_{table}_destination_id', table_name=table)
        op.drop_table(table)
    op.drop_index('ix_destination_city', table_name='destination')
    op.drop_table('destination')
    op.drop_index('ix_user_auth_token', table_name='user')
    op.drop_index('ix_user_username', table_name='user')
    op.drop_table('user')
