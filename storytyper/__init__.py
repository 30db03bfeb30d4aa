"""
storytyper - typing practice over a story that is written and illustrated
while you type.
"""

from .config import *
from .typing_test import *
from .results import *
from .story_client import *
from .pipeline import *
from .main_app import *

# Re-export the main symbols
__all__ = [
    # Configuration
    'Settings',
    'load_settings',
    'setup_logging',
    'StoryTyperError',
    'ConfigError',

    # Typing test
    'Key',
    'Test',
    'TestWord',
    'TestEvent',

    # Results
    'Results',

    # Story generation
    'ContentProvider',
    'ClaudeStoryProvider',
    'ProviderError',
    'TextGenerationError',
    'ImageGenerationError',
    'StoryPart',
    'Conversation',
    'ContentProducer',
    'ContentConsumer',
    'PipelineClosedError',
    'start_pipeline',

    # Main application
    'run_app',
    'run_session',
]
