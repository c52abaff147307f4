from profilequest.db.base_class import Base

# Every model must be imported here so Base.metadata knows all tables
# before create_all() runs.
from profilequest.db.models.user import User
from profilequest.db.models.persona import Persona
from profilequest.db.models.quest import Quest
from profilequest.db.models.xp_event import XpEventRecord
