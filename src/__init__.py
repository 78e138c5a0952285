"""
VidChain invisible watermarking engine.

Embeds an encrypted provenance payload into sampled video frames using a
single-level Haar wavelet and QIM, and recovers it by majority vote across
frames.
"""
