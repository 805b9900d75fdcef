"""
Prompt templates for SEO content generation.
"""

from config import CONTENT_TYPES
from content import ContentBrief


def get_generation_prompt(brief: ContentBrief) -> str:
    extras = []
    if brief.custom_prompt:
        extras.append(f"### Additional Instructions\n\n{brief.custom_prompt.strip()}")
    if brief.affiliate_links:
        links = "\n".join(f"- {link.strip()}" for link in brief.affiliate_links.split(",") if link.strip())
        extras.append(
            "### Links to Include\n\n"
            "Work these links into the content where they fit naturally:\n"
            f"{links}"
        )
    extra_sections = ("\n\n" + "\n\n".join(extras)) if extras else ""

    return f"""Create a comprehensive {brief.content_type} about "{brief.keyword}".

## ASSIGNMENT

- Content type: {brief.content_type} ({CONTENT_TYPES[brief.content_type]})
- Target keyword: **{brief.keyword}**
- Target length: {brief.target_length} words
- Tone: {brief.tone}
- Audience: {brief.audience}

## REQUIREMENTS

- Write in an engaging, {brief.tone} tone for {brief.audience}
- Include proper H1, H2, and H3 headings for structure (exactly one H1)
- Optimize for SEO with keyword density between 1-2%
- Include a compelling introduction and conclusion with call-to-action
- Ensure content is original, informative, and valuable to readers
- Use bullet points and numbered lists where appropriate
- Include relevant examples and actionable tips
- Add 2-3 internal links as relative URLs (e.g. <a href="/blog/related-topic">)

## STRUCTURE

1. Engaging introduction that hooks the reader
2. Clear main sections with descriptive subheadings
3. Practical examples and tips throughout
4. Strong conclusion with clear next steps{extra_sections}

Focus on providing genuine value while naturally incorporating the target keyword.

Output ONLY the article as HTML (h1, h2, h3, p, ul, ol, li, a, strong, em tags), starting with the <h1> title. No additional commentary."""
