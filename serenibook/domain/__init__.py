"""Domain packages - layered router / service / repository modules"""
