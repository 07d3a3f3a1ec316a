"""Line-oriented extractors for the Terraria wiki pages."""
