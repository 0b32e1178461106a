"""SchemaEdit configuration"""
