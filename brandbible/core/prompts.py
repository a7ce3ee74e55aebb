"""Prompt text and response schemas for every generation call."""

from typing import Any, Dict

from ..models.schemas import BrandBible, VisualAssetPrompts

# ═══════════════════════════════════════════════════════════════
# RESPONSE SCHEMAS (Gemini OpenAPI subset)
# ═══════════════════════════════════════════════════════════════

_STRING = {"type": "STRING"}

COLOR_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "hex": {"type": "STRING", "description": "Hex code, e.g. '#1A2B3C'."},
        "name": {"type": "STRING", "description": "A descriptive name for the color."},
        "usage": {"type": "STRING", "description": "Intended use, e.g. Primary, Accent."},
    },
    "required": ["hex", "name", "usage"],
}

BRAND_BIBLE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "brandName": {"type": "STRING", "description": "A catchy, relevant brand name."},
        "palette": {
            "type": "ARRAY",
            "description": "Exactly 5 colors forming the brand palette.",
            "items": COLOR_SCHEMA,
            "minItems": 5,
            "maxItems": 5,
        },
        "fonts": {
            "type": "OBJECT",
            "properties": {
                "header": {"type": "STRING", "description": "Google Font for headers."},
                "body": {"type": "STRING", "description": "Google Font for body text."},
                "notes": {"type": "STRING", "description": "Why the pairing works."},
            },
            "required": ["header", "body", "notes"],
        },
        "logoDescriptions": {
            "type": "OBJECT",
            "properties": {
                "primary": {"type": "STRING", "description": "Primary logo. No text."},
                "secondary": {
                    "type": "ARRAY",
                    "description": "Exactly two secondary marks. No text.",
                    "items": _STRING,
                    "minItems": 2,
                    "maxItems": 2,
                },
                "favicon": {
                    "type": "STRING",
                    "description": "Simplified iconic primary logo for 16x16 use. No text, no fine detail.",
                },
            },
            "required": ["primary", "secondary", "favicon"],
        },
        "harmonies": {
            "type": "ARRAY",
            "description": "Two complementary color harmonies.",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING", "description": "Harmony type, e.g. Analogous."},
                    "palette": {
                        "type": "ARRAY",
                        "items": {
                            "type": "OBJECT",
                            "properties": {"hex": _STRING, "name": _STRING},
                            "required": ["hex", "name"],
                        },
                    },
                    "explanation": {"type": "STRING"},
                },
                "required": ["name", "palette", "explanation"],
            },
        },
    },
    "required": ["brandName", "palette", "fonts", "logoDescriptions", "harmonies"],
}

SOCIAL_POSTS_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "posts": {
            "type": "ARRAY",
            "description": "Five social media post ideas.",
            "items": _STRING,
        },
    },
    "required": ["posts"],
}

SEO_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "titleTags": {"type": "ARRAY", "items": _STRING, "description": "3 title tags."},
        "metaDescription": {"type": "STRING", "description": "Homepage meta description."},
        "keywords": {"type": "ARRAY", "items": _STRING, "description": "SEO keywords."},
    },
    "required": ["titleTags", "metaDescription", "keywords"],
}

# ═══════════════════════════════════════════════════════════════
# CHAT
# ═══════════════════════════════════════════════════════════════

CHAT_SYSTEM_INSTRUCTION = """You are "Branding Bot", an expert AI assistant specializing in branding, marketing, and design.
Your goal is to help users refine their brand identity based on the brand bible they've generated.
You are friendly, insightful, and provide actionable advice.
When asked for visual ideas, describe them vividly but do not generate images.
Keep your responses concise and focused on the user's questions."""

CHAT_GREETING = (
    "Hello! I'm your branding assistant. Ask me anything about brand strategy, "
    "design, or marketing."
)

CHAT_APOLOGY = "Sorry, I encountered an error. Please try again."


# ═══════════════════════════════════════════════════════════════
# PROMPT BUILDERS
# ═══════════════════════════════════════════════════════════════

def brand_bible_prompt(mission: str) -> str:
    return f"""Based on the following company mission, generate a comprehensive brand bible.
The output must be a valid JSON object that strictly follows the provided schema.

**Mission:** "{mission}"

The brand bible must include:
1. **brandName**: a catchy and relevant brand name.
2. **palette**: exactly 5 colors, each with 'hex' (e.g. "#FFFFFF"), 'name' (e.g. "Snow White") and 'usage' (e.g. "Primary Background").
3. **fonts**: 'header' and 'body' Google Fonts and 'notes' explaining the choice.
4. **logoDescriptions**: 'primary' (the main logo), 'secondary' (exactly two secondary marks or icons) and 'favicon' (a simplified, iconic version of the primary logo for 16x16 use, no fine detail).
   Descriptions must be detailed enough for an image model, e.g. "A minimalist line art logo of a phoenix rising, geometric style, using the primary brand color". They MUST NOT ask for any text.
5. **harmonies**: 2 color harmonies (e.g. Analogous, Complementary), each with 'name', 'palette' (3-4 colors with 'hex' and 'name') and 'explanation'.
"""


def logo_prompt(description: str) -> str:
    return (
        f"A modern, minimalist vector logo. Description: {description}. "
        "The logo should be on a solid white background, simple, iconic, "
        "and easily recognizable. No text."
    )


def _bible_summary(mission: str, bible: BrandBible) -> str:
    palette = ", ".join(f"{c.name} ({c.hex})" for c in bible.palette)
    return f"""**Company Mission:** "{mission}"

**Brand Name:** {bible.brand_name}
**Color Palette:** {palette}
**Typography:** Header: {bible.fonts.header}, Body: {bible.fonts.body}"""


def brand_voice_prompt(mission: str, bible: BrandBible) -> str:
    return f"""Based on the company mission and brand bible, define the brand's voice and tone.
The output must be in Markdown format.

{_bible_summary(mission, bible)}

Please provide:
## Brand Voice Summary
A short paragraph summarizing the core voice.

## Voice Characteristics
- **We are:** (list 3-4 positive adjectives)
- **We are not:** (list 3-4 contrasting adjectives)

## Example Applications
A few short examples of this voice in action (e.g. a social media post, an email subject line).
"""


def social_posts_prompt(mission: str, bible: BrandBible) -> str:
    return f"""Based on the company mission and brand bible, generate 5 creative and engaging social media post ideas.
The output must be a valid JSON object that strictly follows the provided schema.

{_bible_summary(mission, bible)}
**Voice Notes:** The voice should align with these font choices: {bible.fonts.notes}

Aim for a mix of post types:
- An engaging question for the audience.
- A behind-the-scenes look at the company or product.
- A post celebrating a customer story or user-generated content.
- An educational tip related to the brand's industry.
- A creative promotional post for a product or service.
"""


def seo_prompt(mission: str, bible: BrandBible) -> str:
    return f"""Based on the company mission and brand bible, generate SEO metadata recommendations.
The output must be a valid JSON object that strictly follows the provided schema.

**Company Mission:** "{mission}"
**Brand Name:** {bible.brand_name}

Please provide:
1. **titleTags**: 3 distinct, compelling HTML title tags (about 50-60 characters).
2. **metaDescription**: a concise meta description (150-160 characters) summarizing the brand.
3. **keywords**: 10-15 relevant SEO keywords or keyphrases.
"""


def visual_asset_prompts(bible: BrandBible) -> VisualAssetPrompts:
    """Mood board, banner and post-template prompts for one brand. None ask for text."""
    name = bible.brand_name
    colors = ", ".join(c.name for c in bible.palette)

    return VisualAssetPrompts(
        mood_board=[
            f"An abstract, visually striking image representing the core concept of '{name}'. "
            f"It should evoke innovation and empowerment, using a color palette inspired by {colors}. "
            "High-resolution, cinematic lighting.",
            "A high-quality photograph that captures the mood and essence of the brand. "
            "Clean, modern and professional. It should feel aspirational and align with the brand's mission.",
            f"A textured background that incorporates the brand's primary colors ({colors}) in a subtle, "
            "elegant way. Could be a digital graphic or a photograph of a real-world texture.",
            f"A lifestyle image that represents the target audience of '{name}'. The scene should be "
            "positive and engaging, reflecting the brand's values. Natural lighting.",
        ],
        website_banner=(
            f"A high-resolution website hero banner for '{name}'. Visually captivating, using the "
            f"brand's color palette ({colors}). Professional and modern, with plenty of negative space "
            "on one side for headlines and call-to-action buttons. It must not contain any text. "
            "Abstract and sophisticated."
        ),
        social_banner=(
            f"A professional social media banner for '{name}', using the brand's color palette "
            f"({colors}). Leave ample empty space for text overlays. Modern and clean. "
            "It must not contain any text."
        ),
        post_templates=[
            f"A square social media post template for '{name}'. It should use the brand colors "
            f"({colors}) and have a clean, modern design with a designated area for a photo and text. "
            "It must not contain any text.",
            "A square social media template for a quote or a customer testimonial, with a visually "
            "interesting background using the brand's colors and style. It must not contain any text.",
            "A square social media template for a product announcement or feature highlight. Bold and "
            "eye-catching, using the brand's visual identity. It must not contain any text.",
        ],
    )
