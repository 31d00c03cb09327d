# projecthub/config/security.py
# Security configuration for tokens, password hashing and security logging

import os
from typing import Set

from dotenv import load_dotenv

load_dotenv()


class SecurityConfig:
    """Security configuration for the application"""

    # Token settings
    JWT = {
        'secret_key': os.getenv('SECRET_KEY', 'change-me-in-production'),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'access_token_expire_minutes': int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 60 * 24)),
    }

    # Password hashing
    PASSWORDS = {
        'schemes': ['bcrypt'],
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', 12)),
        'min_length': int(os.getenv('PASSWORD_MIN_LENGTH', 6)),
    }

    # Roles a user may pick when registering without an admin
    ROLES = {
        'self_registration': {'developer', 'designer', 'tester'},
        'default': os.getenv('DEFAULT_USER_ROLE', 'developer'),
    }

    # Logging and monitoring
    MONITORING = {
        'log_security_events': os.getenv('LOG_SECURITY_EVENTS', 'true').lower() == 'true',
        'security_log_file': os.getenv('SECURITY_LOG_FILE', os.path.join('logs', 'security-events.log')),
        'max_log_size': int(os.getenv('MAX_LOG_SIZE', 5 * 1024 * 1024)),  # 5MB
        'log_backup_count': int(os.getenv('LOG_BACKUP_COUNT', 5)),
        'log_level': os.getenv('LOG_LEVEL', 'INFO').upper(),
    }

    # CORS
    CORS = {
        'origins': [
            origin.strip()
            for origin in os.getenv('CORS_ORIGINS', 'http://localhost:3000,http://127.0.0.1:3000').split(',')
            if origin.strip()
        ],
    }

    @classmethod
    def self_registration_roles(cls) -> Set[str]:
        """Roles a public registration is allowed to request"""
        return set(cls.ROLES['self_registration'])

    @classmethod
    def is_self_registration_role(cls, role: str) -> bool:
        """Check if a role can be picked without admin involvement"""
        return role.lower() in cls.ROLES['self_registration']

    @classmethod
    def get_security_log_path(cls) -> str:
        """Get the security log path, creating its directory if needed"""
        log_path = cls.MONITORING['security_log_file']
        log_dir = os.path.dirname(log_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        return log_path
