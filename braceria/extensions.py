from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from .notifications import Notifier

db = SQLAlchemy()
migrate = Migrate()
notifier = Notifier()
