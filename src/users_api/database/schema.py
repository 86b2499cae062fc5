"""
Schema bootstrap and default data for the users table
"""

import logging
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

CREATE_USERS_TABLE = """
    CREATE TABLE IF NOT EXISTS users (
        id SERIAL PRIMARY KEY,
        name VARCHAR(100) NOT NULL,
        email VARCHAR(100) NOT NULL UNIQUE,
        age INTEGER,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

COUNT_USERS = "SELECT COUNT(*) FROM users"

INSERT_SEED_USER = "INSERT INTO users (name, email, age) VALUES ($1, $2, $3)"

SEED_USERS: List[Tuple[str, str, Optional[int]]] = [
    ("Alexandre Martin", "alexandre.martin@example.com", 32),
    ("Camille Dubois", "camille.dubois@example.com", 27),
    ("Thomas Bernard", "thomas.bernard@example.com", 29),
    ("Julie Rousseau", "julie.rousseau@example.com", 31),
    ("Lucas Petit", "lucas.petit@example.com", 26),
    ("Emma Leroy", "emma.leroy@example.com", 30),
]


async def init_schema(db_pool) -> int:
    """
    Create the users table if needed and seed it when empty

    Args:
        db_pool: asyncpg pool (or compatible) to run the bootstrap on

    Returns:
        Number of seed rows inserted (0 when the table already had data)
    """
    async with db_pool.acquire() as conn:
        await conn.execute(CREATE_USERS_TABLE)

        existing = await conn.fetchval(COUNT_USERS)
        if existing:
            logger.info(f"Users table ready ({existing} existing rows)")
            return 0

        async with conn.transaction():
            for user in SEED_USERS:
                await conn.execute(INSERT_SEED_USER, *user)

    logger.info(f"Seeded users table with {len(SEED_USERS)} default rows")
    return len(SEED_USERS)
