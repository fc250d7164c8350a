from pathlib import Path

DEFAULT_DATA_DIR = (Path(__file__).parent.parent.resolve() / "data").absolute().resolve()

# Namespace layout: "{BASE_NAMESPACE}:{namespace}:{segment}:{name}"
BASE_NAMESPACE = "tagcache/TaggedCache"
KEY_SEGMENT = "key"
TAG_SEGMENT = "tag"

# Expiry
MAX_EXPIRES = 31557600  # 1 year, used when neither call nor instance sets a TTL

# Reserved tag applied to every stored key (enables namespace-wide clear)
ALL_KEYS_TAG = "tagged_cache_all_keys"
