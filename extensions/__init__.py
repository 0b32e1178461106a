"""SchemaEdit extensions"""
