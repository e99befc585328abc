"""
Prompt 拼接
"""
from typing import Optional

from pixology.models.style_parameters import StyleParameters


def compose_prompt(base_prompt: str, style_parameters: Optional[StyleParameters] = None) -> str:
    """
    将风格参数拼接到用户 Prompt 之后

    顺序固定：风格 -> 配色 -> 氛围 -> 附加修饰词（原样）。
    顺序影响输出，调整前需确认下游的复现需求。

    Args:
        base_prompt: 用户原始 Prompt
        style_parameters: 风格参数（可选）

    Returns:
        发送给模型的 Prompt；没有任何风格子句时原样返回
    """
    if style_parameters is None:
        return base_prompt

    clauses: list[str] = []
    if style_parameters.style:
        clauses.append(f"in {style_parameters.style} style")
    if style_parameters.color_scheme:
        clauses.append(f"with {style_parameters.color_scheme} color scheme")
    if style_parameters.mood:
        clauses.append(f"{style_parameters.mood} mood")
    if style_parameters.modifiers:
        clauses.extend(style_parameters.modifiers)

    if not clauses:
        return base_prompt

    return f"{base_prompt}, {', '.join(clauses)}"
