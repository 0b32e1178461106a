"""Connection provider plugins (PyMySQL, psycopg2, sqlite3)"""
