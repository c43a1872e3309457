from buddhascope.io.image import ImageWriteError, save_image, write_ppm
