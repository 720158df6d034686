CLIP_ORDER_INSTRUCTIONS = {
    "STRICT": "Use clips in exact order provided (1→2→3). Use ALL clips.",
    "AI_OPTIMIZED": "Analyze clips and reorder for maximum impact. May skip clips if needed.",
}

CLIP_LINE_TEMPLATE = "Clip {number}: {text}"

SCRIPT_PROMPT_TEMPLATE = """Generate a script matching these example patterns:

EXAMPLE HOOK STYLES:
"Why the fuck is nobody talking about what just happened on this episode of the Kardashians? I'm gonna play the clip for you right here."
"This fucker went after the most predatory industry in the world and got silenced for it. Watch this clip before they take it down."
"Why is nobody talking about how everyone is just aging in reverse? This mother and daughter are exposing the truth."
"This is the most fucked up Simpsons prediction ever, and America made this evil shit come true!?"

EXAMPLE SCRIPT SEGMENT:
**Backend 5 — POINTING UP**
NO CAPTIONS ON SCREEN. NO CAMERA MOVEMENTS. NO EDITS.
Handheld phone video style. Make the avatar say in a concerned tone:
"Now the crazy thing is our body's naturally produce NAD, but after we turn around 30 years old, that's when our NAD levels start to plummet and the aging process starts."

EXAMPLE PRODUCT REVEAL:
**Backend 10 — HOLDING PRODUCT**
NO CAPTIONS ON SCREEN. NO CAMERA MOVEMENTS. NO EDITS.
Handheld phone video style. Make the avatar say in a helpful tone:
"Now I spoke to my doctor and this is the one they recommended for me from Micro Ingredients."

EXAMPLE CTA:
**Backend 13 — HOLDING PRODUCT**
NO CAPTIONS ON SCREEN. NO CAMERA MOVEMENTS. NO EDITS.
Handheld phone video style. Make the avatar say in a closing CTA tone:
"So if you did wanna try this and you're still seeing the link in this video, I would run and grab a bottle before they are completely gone."

ALTERNATIVE CTA EXAMPLES:
"If you see that orange cart down below, that means you can still pick up one, but if that cart isn't there, they already sold out."
"Link's right here in the video. If you can still see it, grab some while you can."
"The button should be right there on this video. If it's still showing up, they haven't sold out yet."

---

YOUR TASK:
{clip_order}

CLIPS PROVIDED:
{clips}

PRODUCT: {product_link}

Generate a complete script following this EXACT format and style with 12 backend segments, 2 hooks, and marked clip placements.

CRITICAL RULES:
- Keep EVERY dialogue segment under 20 words
- Use casual language (swearing is natural where appropriate)
- Reference SPECIFIC sources in hooks (names, shows, platforms)
- Match the energy/style of the example hooks
- Each segment = ~8 seconds of speaking
- Mark clip placements clearly"""
