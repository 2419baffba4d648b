"""Seed data shown when sample mode is switched on."""

from __future__ import annotations

from .models.trends import ClipSession, GeneratedClip, TrendingVideo, TrendSummary, pair_clips

SAMPLE_FETCHED_AT = "2026-02-23T12:00:00Z"

SAMPLE_VIDEOS = (
    TrendingVideo(
        video_id="tt_001", title="POV: When the bass drops at 3am",
        creator_username="@beatdropper", creator_display_name="BeatDropper",
        view_count=12_500_000, like_count=3_200_000, share_count=890_000, comment_count=145_000,
        engagement_score=94.5, hashtags=("#bass", "#edm", "#vibes", "#fyp"),
        posted_date="2026-02-21", duration_seconds=45, trending_rank=1, platform="tiktok",
    ),
    TrendingVideo(
        video_id="yt_002", title="I Built a Robot That Cooks Dinner - Gone Wrong",
        creator_username="@techcrafter", creator_display_name="TechCrafter",
        view_count=8_700_000, like_count=620_000, share_count=340_000, comment_count=89_000,
        engagement_score=88.2, hashtags=("#robotics", "#diy", "#fail", "#cooking"),
        posted_date="2026-02-20", duration_seconds=720, trending_rank=2, platform="youtube",
    ),
    TrendingVideo(
        video_id="ig_003", title="Sunset timelapse from my balcony in Tokyo",
        creator_username="@tokyodreams", creator_display_name="Tokyo Dreams",
        view_count=5_400_000, like_count=1_800_000, share_count=560_000, comment_count=67_000,
        engagement_score=91.1, hashtags=("#tokyo", "#sunset", "#timelapse", "#japan"),
        posted_date="2026-02-22", duration_seconds=60, trending_rank=3, platform="instagram",
    ),
    TrendingVideo(
        video_id="tt_004", title="This makeup hack changed everything",
        creator_username="@glamqueen", creator_display_name="Glam Queen",
        view_count=9_800_000, like_count=2_100_000, share_count=1_200_000, comment_count=210_000,
        engagement_score=92.7, hashtags=("#makeup", "#beauty", "#hack", "#grwm"),
        posted_date="2026-02-21", duration_seconds=32, trending_rank=4, platform="tiktok",
    ),
    TrendingVideo(
        video_id="yt_005", title="24 Hours Living as a Medieval Knight",
        creator_username="@historynut", creator_display_name="History Nut",
        view_count=6_300_000, like_count=450_000, share_count=280_000, comment_count=56_000,
        engagement_score=85.4, hashtags=("#medieval", "#challenge", "#history", "#knight"),
        posted_date="2026-02-19", duration_seconds=1200, trending_rank=5, platform="youtube",
    ),
    TrendingVideo(
        video_id="ig_006", title="Street food tour in Bangkok - must try!",
        creator_username="@foodwanderer", creator_display_name="Food Wanderer",
        view_count=4_200_000, like_count=980_000, share_count=410_000, comment_count=73_000,
        engagement_score=87.9, hashtags=("#streetfood", "#bangkok", "#foodie", "#travel"),
        posted_date="2026-02-22", duration_seconds=90, trending_rank=6, platform="instagram",
    ),
)

SAMPLE_SUMMARY = TrendSummary(
    total_videos=6, tiktok_count=2, youtube_count=2, instagram_count=2,
    trending_themes=("Music & Bass", "DIY & Tech", "Travel", "Beauty", "Food", "History"),
)

SAMPLE_CLIPS = (
    GeneratedClip(
        clip_id="cl_001", source_video_id="yt_002", clip_title="Robot Arm Malfunction Moment",
        start_time="02:15", end_time="02:45", duration_seconds=30, aspect_ratio="9:16",
        target_platform="TikTok", captions_included=True, highlight_type="Hook",
        confidence_score=0.95,
    ),
    GeneratedClip(
        clip_id="cl_002", source_video_id="yt_002", clip_title="The Big Reveal",
        start_time="08:30", end_time="09:10", duration_seconds=40, aspect_ratio="9:16",
        target_platform="Instagram Reels", captions_included=True, highlight_type="Punchline",
        confidence_score=0.88,
    ),
    GeneratedClip(
        clip_id="cl_003", source_video_id="yt_002", clip_title="Epic Kitchen Fail Compilation",
        start_time="05:00", end_time="06:00", duration_seconds=60, aspect_ratio="1:1",
        target_platform="YouTube Shorts", captions_included=True, highlight_type="Key Scene",
        confidence_score=0.82,
    ),
)


def sample_session() -> ClipSession:
    pairs, _ = pair_clips(SAMPLE_CLIPS, ())
    return ClipSession(
        id="sample_session_1",
        source_video_title="I Built a Robot That Cooks Dinner - Gone Wrong",
        pairs=pairs,
        total_clips=3,
        processing_summary=(
            "Successfully generated 3 clips targeting TikTok, Instagram Reels, "
            "and YouTube Shorts with auto-generated captions."
        ),
        generated_at="2026-02-23T11:30:00Z",
    )
