# bloodreport/create_tables.py
from bloodreport.models import init_db

if __name__ == "__main__":
    print("Creating tables...")
    init_db()
    print("Tables created.")
