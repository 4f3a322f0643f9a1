from sandcraft.prompts.sandpack_prompts import (
    build_component_prompt,
    build_context_block,
    build_react_prompt,
    build_user_prompt,
    get_examples,
    get_system_prompt,
    is_suitable_for_sandpack,
    transform_request,
)

__all__ = [
    "build_component_prompt",
    "build_context_block",
    "build_react_prompt",
    "build_user_prompt",
    "get_examples",
    "get_system_prompt",
    "is_suitable_for_sandpack",
    "transform_request",
]
