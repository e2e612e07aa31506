"""ThorClient CLI"""
