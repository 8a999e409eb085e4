"""Create marketplace tables

Revision ID: 001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create marketplace tables"""

    # 1. Members
    op.create_table('users',
        sa.Column('user_id', sa.String(128), nullable=False, comment='Auth provider uid'),
        sa.Column('username', sa.String(30), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('avatar_url', sa.String(1024), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('joined_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('plants_listed', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('plants_traded', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reward_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('favorite_plants', sa.JSON(), nullable=False, comment='Wishlisted listing ids'),
        sa.Column('followers', sa.JSON(), nullable=False),
        sa.Column('following', sa.JSON(), nullable=False),
        sa.Column('subscription_status', sa.String(10), nullable=False, server_default='free'),
        sa.Column('subscription_expiry', sa.DateTime(timezone=True), nullable=True),
        sa.Column('stripe_account_id', sa.String(255), nullable=True, comment='Connect account for payouts'),
        sa.Column('stripe_details_submitted', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('stripe_customer_id', sa.String(255), nullable=True),

        sa.PrimaryKeyConstraint('user_id'),
        sa.UniqueConstraint('username'),
        sa.CheckConstraint('reward_points >= 0', name='ck_users_reward_points_non_negative'),
        sa.CheckConstraint("subscription_status IN ('free', 'pro')", name='ck_users_subscription_status'),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)
    op.create_index('ix_users_stripe_customer_id', 'users', ['stripe_customer_id'])

    # 2. Listings
    op.create_table('plant_listings',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('image_urls', sa.JSON(), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=True),
        sa.Column('trade_only', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('listing_type', sa.String(20), nullable=False, server_default='sale'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('tags', sa.JSON(), nullable=False),
        sa.Column('search_tags', sa.String(1024), nullable=False, server_default=''),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('owner_id', sa.String(128), nullable=False),
        sa.Column('owner_username', sa.String(30), nullable=False),
        sa.Column('owner_avatar_url', sa.String(1024), nullable=True),
        sa.Column('listed_date', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('featured_until', sa.DateTime(timezone=True), nullable=True),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.CheckConstraint('quantity >= 0', name='ck_plant_listings_quantity_non_negative'),
        sa.CheckConstraint('price IS NULL OR price >= 0', name='ck_plant_listings_price_non_negative'),
        sa.CheckConstraint(
            "listing_type IN ('sale', 'trade', 'sale_trade')", name='ck_plant_listings_listing_type'
        ),
    )
    op.create_index('ix_plant_listings_is_available', 'plant_listings', ['is_available'])
    op.create_index('ix_plant_listings_owner_id', 'plant_listings', ['owner_id'])
    op.create_index('ix_plant_listings_catalog', 'plant_listings', ['is_available', 'listed_date', 'id'])
    op.create_index('ix_plant_listings_featured', 'plant_listings', ['is_featured', 'featured_until'])

    # 3. Reward ledger
    op.create_table('reward_transactions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('type', sa.String(10), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.CheckConstraint('points > 0', name='ck_reward_transactions_points_positive'),
        sa.CheckConstraint("type IN ('earn', 'spend')", name='ck_reward_transactions_type'),
    )
    op.create_index('ix_reward_transactions_user_timestamp', 'reward_transactions', ['user_id', 'timestamp'])

    # 4. Notifications
    op.create_table('notifications',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('type', sa.String(20), nullable=False),
        sa.Column('message', sa.String(500), nullable=False),
        sa.Column('link', sa.String(500), nullable=True),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
    )
    op.create_index('ix_notifications_user_created', 'notifications', ['user_id', 'created_at'])
    op.create_index('ix_notifications_user_unread', 'notifications', ['user_id', 'is_read'])

    # 5. Cart
    op.create_table('cart_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('plant_id', sa.String(36), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.user_id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'plant_id', name='uq_cart_items_user_plant'),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity_positive'),
    )
    op.create_index('ix_cart_items_user_id', 'cart_items', ['user_id'])

    # 6. Orders
    op.create_table('orders',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('buyer_id', sa.String(128), nullable=False),
        sa.Column('seller_ids', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(20), nullable=False, server_default='paid'),
        sa.Column('stripe_session_id', sa.String(255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('tracking_number', sa.String(100), nullable=True),
        sa.Column('label_url', sa.String(1024), nullable=True),
        sa.Column('shipped_at', sa.DateTime(timezone=True), nullable=True),

        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('stripe_session_id'),
        sa.CheckConstraint("status IN ('paid', 'shipped', 'cancelled')", name='ck_orders_status'),
    )
    op.create_index('ix_orders_buyer_id', 'orders', ['buyer_id'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])

    op.create_table('order_items',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('order_id', sa.String(36), nullable=False),
        sa.Column('plant_id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(120), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('image_url', sa.String(1024), nullable=True),
        sa.Column('seller_id', sa.String(128), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['order_id'], ['orders.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])
    op.create_index('ix_order_items_seller_id', 'order_items', ['seller_id'])

    # 7. Messaging
    op.create_table('chats',
        sa.Column('id', sa.String(257), nullable=False),
        sa.Column('user_a', sa.String(128), nullable=False),
        sa.Column('user_b', sa.String(128), nullable=False),
        sa.Column('participant_details', sa.JSON(), nullable=False),
        sa.Column('last_message', sa.Text(), nullable=False, server_default=''),
        sa.Column(
            'last_message_timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_chats_user_a', 'chats', ['user_a'])
    op.create_index('ix_chats_user_b', 'chats', ['user_b'])

    op.create_table('messages',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('chat_id', sa.String(257), nullable=False),
        sa.Column('sender_id', sa.String(128), nullable=False),
        sa.Column('receiver_id', sa.String(128), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['chat_id'], ['chats.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_messages_chat_timestamp', 'messages', ['chat_id', 'timestamp'])
    op.create_index('ix_messages_receiver_read', 'messages', ['receiver_id', 'read'])

    # 8. Community
    op.create_table('forums',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.String(200), nullable=False),
        sa.Column('creator_id', sa.String(128), nullable=False),
        sa.Column('banner_url', sa.String(1024), nullable=True),
        sa.Column('moderators', sa.JSON(), nullable=False),
        sa.Column('member_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('member_count >= 1', name='ck_forums_member_count_min'),
    )
    op.create_index('ix_forums_creator_id', 'forums', ['creator_id'])
    op.create_index('ix_forums_created_at', 'forums', ['created_at'])

    op.create_table('forum_members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('forum_id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(128), nullable=False),
        sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['forum_id'], ['forums.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('forum_id', 'user_id', name='uq_forum_members_forum_user'),
    )
    op.create_index('ix_forum_members_user_id', 'forum_members', ['user_id'])

    op.create_table('posts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('forum_id', sa.String(36), nullable=False),
        sa.Column('author_id', sa.String(128), nullable=False),
        sa.Column('author_username', sa.String(30), nullable=False),
        sa.Column('author_avatar_url', sa.String(1024), nullable=True),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(1024), nullable=True),
        sa.Column('upvotes', sa.JSON(), nullable=False),
        sa.Column('downvotes', sa.JSON(), nullable=False),
        sa.Column('comment_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['forum_id'], ['forums.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_posts_author_id', 'posts', ['author_id'])
    op.create_index('ix_posts_forum_created', 'posts', ['forum_id', 'created_at'])

    op.create_table('comments',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('post_id', sa.String(36), nullable=False),
        sa.Column('author_id', sa.String(128), nullable=False),
        sa.Column('author_username', sa.String(30), nullable=False),
        sa.Column('author_avatar_url', sa.String(1024), nullable=True),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], ondelete='CASCADE'),
    )
    op.create_index('ix_comments_post_created', 'comments', ['post_id', 'created_at'])


def downgrade() -> None:
    """Drop marketplace tables"""

    op.drop_table('comments')
    op.drop_table('posts')
    op.drop_table('forum_members')
    op.drop_table('forums')
    op.drop_table('messages')
    op.drop_table('chats')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('cart_items')
    op.drop_table('notifications')
    op.drop_table('reward_transactions')
    op.drop_table('plant_listings')
    op.drop_table('users')
