"""
Watchlist and user document access.

Users are written by the authentication provider into the 'user' collection;
this module only reads them. Watchlist entries are keyed by (userId, symbol).
"""
import re
import logging
from datetime import datetime, timezone
from pymongo import DESCENDING
from pymongo.errors import PyMongoError
from app_config import USER_COLLECTION, WATCHLIST_COLLECTION

logger = logging.getLogger(__name__)


def normalize_symbol(symbol):
    return symbol.strip().upper()


def _user_id(user):
    return str(user.get('id') or user.get('_id') or '')


class WatchlistStore:
    """
    Reads users and reads/writes watchlist entries through a connection manager.

    Attributes:
        manager (MongoConnectionManager): Shared connection service.
    """

    def __init__(self, manager, database_name=None):
        self.manager = manager
        self.database_name = database_name

    @property
    def users(self):
        return self.manager.get_database(self.database_name)[USER_COLLECTION]

    @property
    def watchlist(self):
        return self.manager.get_database(self.database_name)[WATCHLIST_COLLECTION]

    def find_user_by_email(self, email):
        """
        Find a user by email, ignoring case.

        Args:
            email (str): Email address; surrounding whitespace is ignored.

        Returns:
            dict: The user document, or None.
        """
        if not email or not email.strip():
            return None
        pattern = f"^{re.escape(email.strip())}$"
        return self.users.find_one({'email': {'$regex': pattern, '$options': 'i'}})

    def get_all_users_for_news_email(self):
        """Users that have both an email and a name, for the daily news email."""
        try:
            users = self.users.find(
                {'email': {'$exists': True, '$ne': None}},
                projection={'_id': 1, 'id': 1, 'email': 1, 'name': 1, 'country': 1}
            )
            return [
                {'id': _user_id(user), 'email': user['email'], 'name': user['name']}
                for user in users
                if user.get('email') and user.get('name')
            ]
        except PyMongoError as e:
            logger.error(f"Error fetching users for news email: {e}")
            return []

    def get_watchlist_symbols_by_email(self, email):
        if not email:
            return []
        try:
            user = self.find_user_by_email(email)
            if not user:
                return []
            user_id = _user_id(user)
            if not user_id:
                return []
            items = self.watchlist.find({'userId': user_id}, projection={'symbol': 1})
            return [str(item['symbol']) for item in items]
        except PyMongoError as e:
            logger.error(f"get_watchlist_symbols_by_email error: {e}")
            return []

    def get_watchlist_items_by_user_id(self, user_id):
        """Watchlist entries of a user, most recently added first."""
        if not user_id:
            return []
        try:
            return list(self.watchlist.find({'userId': user_id}).sort('addedAt', DESCENDING))
        except PyMongoError as e:
            logger.error(f"get_watchlist_items_by_user_id error: {e}")
            return []

    def get_watchlist_for_dashboard(self, user_id):
        items = self.get_watchlist_items_by_user_id(user_id)
        dashboard = []
        for item in items:
            added_at = item.get('addedAt')
            dashboard.append({
                'symbol': item['symbol'],
                'company': item.get('company'),
                'addedAt': added_at.isoformat() if added_at else None
            })
        return dashboard

    def is_symbol_in_watchlist(self, user_id, symbol):
        if not user_id or not symbol:
            return False
        count = self.watchlist.count_documents({'userId': user_id, 'symbol': normalize_symbol(symbol)})
        return count > 0

    def add_to_watchlist(self, user_id, symbol, company=None):
        """
        Add a symbol to a user's watchlist, or refresh it if already present.

        Args:
            user_id (str): Owner of the watchlist.
            symbol (str): Ticker symbol; normalized to upper case.
            company (str, optional): Company name. Defaults to the symbol.

        Returns:
            dict: {'success': True}

        Raises:
            ValueError: If user_id or symbol is missing.
        """
        if not user_id or not symbol or not symbol.strip():
            raise ValueError("Missing watchlist parameters")
        upper = normalize_symbol(symbol)
        name = (company or '').strip() or upper
        self.watchlist.update_one(
            {'userId': user_id, 'symbol': upper},
            {'$set': {'userId': user_id, 'symbol': upper, 'company': name,
                      'addedAt': datetime.now(timezone.utc)}},
            upsert=True
        )
        logger.debug(f"Added {upper} to watchlist of user {user_id}")
        return {'success': True}

    def remove_from_watchlist(self, user_id, symbol):
        if not user_id or not symbol or not symbol.strip():
            raise ValueError("Missing watchlist parameters")
        upper = normalize_symbol(symbol)
        self.watchlist.delete_one({'userId': user_id, 'symbol': upper})
        logger.debug(f"Removed {upper} from watchlist of user {user_id}")
        return {'success': True}
