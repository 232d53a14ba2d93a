# db_tables.py: single source of truth for table names
TRAINING_PAGES     = "TrainingPage"
USER_TAGS          = "UserTag"
TRAINING_PAGE_TAGS = "TrainingPageTag"
USERS              = "User"
