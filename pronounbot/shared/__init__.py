"""Transport-independent pieces of the pronoun bot."""
