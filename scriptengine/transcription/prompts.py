VIDEO_ANALYSIS_PROMPT = """Analyze this video clip and provide:
1. A brief description of who/what is in the video (e.g., "TikTok video of woman showing McDonald's burger", "Kevin Gates on livestream", "Dr. Bobby Price podcast interview")
2. A complete transcript of what is said

Format your response EXACTLY as:
Description: [your description]
Transcript: [full transcript]"""
