"""
KitaDocs API: doctor verification, assessment forms and health articles.
"""
