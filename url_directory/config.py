from pathlib import Path
from typing import Dict, List, Optional
import json
import logging

import yaml

from .errors import ConfigLoadError
from .models.weblink import CategoryDefinition

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'timeout': 10,
    'user_agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36',
    'page_size': 16,
    'show_progress': True,
    'output': 'organized-urls.md',
}


def default_categories() -> List[dict]:
    """Category set used when no configuration file is given."""
    return [
        {
            'name': 'Development Resources',
            'description': 'Repositories, API references and libraries',
            'tags': ['code'],
            'keywords': ['github', 'gitlab', 'api', 'sdk', 'library', 'repo', 'stackoverflow'],
        },
        {
            'name': 'Web Development',
            'description': 'Frontend frameworks and design resources',
            'tags': ['web'],
            'keywords': ['css', 'html', 'javascript', 'react', 'vue', 'angular', 'frontend'],
        },
        {
            'name': 'DevOps & Infrastructure',
            'description': 'Cloud, containers and delivery pipelines',
            'tags': ['ops'],
            'keywords': ['aws', 'azure', 'docker', 'kubernetes', 'devops', 'terraform', 'pipeline'],
        },
        {
            'name': 'Learning Resources',
            'description': 'Courses, tutorials and guides',
            'tags': ['learning'],
            'keywords': ['course', 'learn', 'tutorial', 'training', 'guide', 'lesson'],
        },
        {
            'name': 'News & Articles',
            'description': 'Blogs and news sites',
            'tags': ['reading'],
            'keywords': ['blog', 'news', 'article', 'medium'],
        },
    ]


def _read_document(config_path: Path):
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            if config_path.suffix.lower() in ('.yaml', '.yml'):
                return yaml.safe_load(f)
            return json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(f"Failed to read config file {config_path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigLoadError(f"Invalid config file {config_path}: {e}") from e


def _as_string(value, field: str, category: str) -> str:
    if value is None:
        return ''
    if not isinstance(value, str):
        raise ConfigLoadError(f"Category '{category}': '{field}' must be a string")
    return value


def _as_string_list(value, field: str, category: str) -> tuple:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigLoadError(f"Category '{category}': '{field}' must be a list of strings")
    return tuple(value)


def parse_categories(raw_categories) -> List[CategoryDefinition]:
    if not isinstance(raw_categories, list):
        raise ConfigLoadError("'categories' must be a list")

    definitions = []
    for item in raw_categories:
        if not isinstance(item, dict) or not isinstance(item.get('name'), str) or not item['name'].strip():
            raise ConfigLoadError(f"Every category needs a non-empty 'name': {item!r}")
        name = item['name']
        definitions.append(CategoryDefinition(
            name=name,
            description=_as_string(item.get('description'), 'description', name),
            tags=_as_string_list(item.get('tags'), 'tags', name),
            keywords=_as_string_list(item.get('keywords'), 'keywords', name),
        ))
    return definitions


def parse_settings(raw_settings) -> dict:
    if raw_settings is None:
        raw_settings = {}
    if not isinstance(raw_settings, dict):
        raise ConfigLoadError("'settings' must be a mapping")

    settings = {**DEFAULT_SETTINGS, **raw_settings}
    for key in ('timeout', 'page_size'):
        value = settings[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigLoadError(f"Setting '{key}' must be a positive number, got {value!r}")
    settings['page_size'] = int(settings['page_size'])
    return settings


def load_config(config_path: Optional[str]) -> Dict:
    """Load category definitions and settings from JSON or YAML.

    Without a path the built-in categories are used. A path that cannot be
    read or decoded, or a document of the wrong shape, raises ConfigLoadError.
    """
    if not config_path:
        logger.info("Using default configuration")
        return {
            'settings': dict(DEFAULT_SETTINGS),
            'categories': parse_categories(default_categories()),
        }

    config_path = Path(config_path)
    document = _read_document(config_path)
    if not isinstance(document, dict) or 'categories' not in document:
        raise ConfigLoadError(f"Config file {config_path} has no 'categories' list")

    config = {
        'settings': parse_settings(document.get('settings')),
        'categories': parse_categories(document['categories']),
    }
    logger.info(f"Loaded {len(config['categories'])} categories from {config_path}")
    return config
