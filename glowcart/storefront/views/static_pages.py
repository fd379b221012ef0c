"""
Static pages: blog.
"""
from django.shortcuts import render

BLOG_POSTS = (
    {
        'title': "Summer Makeup Trends 2025",
        'excerpt': "Discover the hottest makeup looks for the summer season.",
        'image': "https://images.unsplash.com/photo-1688953228417-8ec4007eb532?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=1080",
        'date': "Dec 15, 2024",
    },
    {
        'title': "Skincare Routine Guide",
        'excerpt': "Build the perfect skincare routine for your skin type.",
        'image': "https://images.unsplash.com/photo-1665763630810-e6251bdd392d?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=1080",
        'date': "Dec 12, 2024",
    },
    {
        'title': "Fragrance Layering Tips",
        'excerpt': "Learn how to layer fragrances like a professional.",
        'image': "https://images.unsplash.com/photo-1757313202626-8b763ce254a1?crop=entropy&cs=tinysrgb&fit=max&fm=jpg&q=80&w=1080",
        'date': "Dec 10, 2024",
    },
)


def blog(request):
    return render(request, 'storefront/pages/blog.html', {'blog_posts': BLOG_POSTS})
