"""
UniBook – contact book for university modules, professors and students.
"""
